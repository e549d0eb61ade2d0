#!/usr/bin/env python3
from __future__ import annotations

from pathlib import Path
from typing import TypeGuard

import yaml


REPO_ROOT = Path(__file__).resolve().parents[1]
CODES_REL = Path("services/depexec/src/depexec/diagnostics/codes.yaml")


def _is_dict(value: object) -> TypeGuard[dict[object, object]]:
    return isinstance(value, dict)


def _as_dict(value: object) -> dict[str, object]:
    if not _is_dict(value):
        return {}
    return {str(k): v for k, v in value.items()}


def load_codes(src: Path) -> list[dict[str, object]]:
    if not src.exists():
        raise SystemExit(f"Diagnostics source not found: {src}")
    data = _as_dict(yaml.safe_load(src.read_text(encoding="utf-8")) or {})
    if data.get("version") != 1:
        raise SystemExit(f"Unsupported diagnostics version: {data.get('version')}")
    raw_codes = data.get("codes")
    if not isinstance(raw_codes, list):
        raise SystemExit("Invalid codes.yaml: expected top-level 'codes' list")
    codes: list[dict[str, object]] = []
    for entry in raw_codes:
        if not _is_dict(entry):
            raise SystemExit("Invalid codes.yaml: entries must be mappings")
        item = _as_dict(entry)
        if not all(str(item.get(key) or "").strip() for key in ("code", "severity", "rule")):
            raise SystemExit(f"Invalid diagnostic entry (missing required fields): {item}")
        codes.append(item)
    return codes


def _cell(item: dict[str, object], key: str) -> str:
    return str(item.get(key) or "").strip().replace("\n", " ").replace("|", "\\|")


def _by_family(codes: list[dict[str, object]]) -> dict[str, list[dict[str, object]]]:
    families: dict[str, list[dict[str, object]]] = {}
    for item in sorted(codes, key=lambda x: str(x.get("code", ""))):
        family = _cell(item, "rule").split(".", 1)[0]
        families.setdefault(family, []).append(item)
    return dict(sorted(families.items()))


def generate(repo_root: Path = REPO_ROOT) -> Path:
    codes = load_codes(repo_root / CODES_REL)
    out = repo_root / "docs" / "reference" / "diagnostic-codes.md"

    lines = [
        "> **Generated file. Do not edit directly.**",
        "> Run: `python scripts/generate_diagnostic_codes.py`",
        "",
        "# Diagnostic codes",
        "",
        f"This page is generated from `{CODES_REL.as_posix()}`.",
        "Codes are grouped by the first segment of their rule.",
    ]
    for family, items in _by_family(codes).items():
        lines.extend(
            [
                "",
                f"## {family}",
                "",
                "| Code | Severity | Rule | Message | Hint |",
                "|---|---|---|---|---|",
            ]
        )
        for item in items:
            lines.append(
                f"| `{_cell(item, 'code')}` | `{_cell(item, 'severity')}` "
                f"| `{_cell(item, 'rule')}` | {_cell(item, 'message')} | {_cell(item, 'hint')} |"
            )

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text("\n".join(lines) + "\n", encoding="utf-8")
    print(f"Generated {out}")
    return out


if __name__ == "__main__":
    generate()
