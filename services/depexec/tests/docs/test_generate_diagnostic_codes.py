import tempfile
import unittest
from pathlib import Path

import generate_diagnostic_codes

from depexec.application.rendering import EXEC_CODES

REPO_ROOT = Path(__file__).resolve().parents[4]
CONFIG_CODES = {"CONFIG_PARSE_FAILED", "CONFIG_MODE_INVALID", "CONFIG_JOURNAL_REQUIRED"}


class GenerateDiagnosticCodesTest(unittest.TestCase):
    def test_generates_markdown_from_codes_yaml(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            repo_root = Path(tmpdir)
            src = repo_root / generate_diagnostic_codes.CODES_REL
            src.parent.mkdir(parents=True)
            src.write_text(
                """
version: 1
codes:
  - code: EXEC_EXAMPLE
    severity: error
    rule: exec.example
    message: Example message | with a pipe
    hint: Example hint
""".lstrip(),
                encoding="utf-8",
            )

            out = generate_diagnostic_codes.generate(repo_root).read_text(encoding="utf-8")
            self.assertIn("Generated file. Do not edit directly.", out)
            self.assertIn("`EXEC_EXAMPLE`", out)
            self.assertIn("## exec", out)
            self.assertIn("Example message \\| with a pipe", out)

    def test_catalogue_covers_every_emitted_code(self) -> None:
        codes = generate_diagnostic_codes.load_codes(
            REPO_ROOT / generate_diagnostic_codes.CODES_REL
        )
        catalogued = {str(item["code"]): str(item["rule"]) for item in codes}
        for code, rule in EXEC_CODES.items():
            self.assertEqual(catalogued.get(code), rule, code)
        self.assertTrue(CONFIG_CODES <= set(catalogued))


if __name__ == "__main__":
    unittest.main()
