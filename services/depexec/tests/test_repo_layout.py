from pathlib import Path

import pytest


def _repo_root() -> Path:
    for parent in Path(__file__).resolve().parents:
        if (parent / "pyproject.toml").exists():
            return parent
    pytest.skip("Could not locate repo root")
    return Path(".")


def test_repo_layout_basics_exist() -> None:
    root = _repo_root()
    src = root / "services/depexec/src/depexec"
    assert (src / "entrypoints/cli.py").exists()
    assert (src / "schemas/exec-journal.schema.v1.json").exists()
    assert (src / "schemas/failure-report.schema.v1.json").exists()
    assert (src / "diagnostics/codes.yaml").exists()
    assert (root / "scripts/generate_diagnostic_codes.py").exists()
