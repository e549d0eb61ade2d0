from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
import tomllib
from typing import Mapping

from depexec.domain.diagnostics import Diagnostic, FileLocation, Severity, ValueLocation
from depexec.domain.json_types import as_json_dict
from depexec.domain.result import Result

CONFIG_FILENAME = ".depexec.toml"
MODE_ENV = "DEPEXEC_MODE"
JOURNAL_ENV = "DEPEXEC_JOURNAL"


class ExecMode(str, Enum):
    LIVE = "live"
    RECORD = "record"
    REPLAY = "replay"


@dataclass(frozen=True)
class ExecSettings:
    mode: ExecMode = ExecMode.LIVE
    journal_path: Path | None = None


def _read_config(path: Path) -> Result[dict[str, object]]:
    if not path.exists():
        return Result(value={})
    try:
        raw = as_json_dict(tomllib.loads(path.read_text(encoding="utf-8")))
    except (OSError, tomllib.TOMLDecodeError) as e:
        return Result(
            diagnostics=[
                Diagnostic(
                    code="CONFIG_PARSE_FAILED",
                    rule="config.parse",
                    severity=Severity.ERROR,
                    message=str(e),
                    location=FileLocation(str(path)),
                )
            ]
        )
    return Result(value=dict(as_json_dict(raw.get("exec"))))


def load_settings(root: Path, environ: Mapping[str, str]) -> Result[ExecSettings]:
    """Settings from `<root>/.depexec.toml`, overridden by the environment."""
    config_path = root / CONFIG_FILENAME
    config = _read_config(config_path)
    if config.value is None:
        return Result(diagnostics=config.diagnostics)
    section = config.value

    raw_mode = environ.get(MODE_ENV) or section.get("mode") or ExecMode.LIVE.value
    try:
        mode = ExecMode(str(raw_mode))
    except ValueError:
        return Result(
            diagnostics=[
                Diagnostic(
                    code="CONFIG_MODE_INVALID",
                    rule="config.mode",
                    severity=Severity.ERROR,
                    message=f"Unknown exec mode: {raw_mode}",
                    location=ValueLocation("mode", str(raw_mode)),
                    hint="Use one of: " + ", ".join(m.value for m in ExecMode),
                )
            ]
        )

    raw_journal = environ.get(JOURNAL_ENV) or section.get("journal")
    journal_path: Path | None = None
    if raw_journal:
        journal_path = Path(str(raw_journal))
        if not journal_path.is_absolute():
            journal_path = root / journal_path
    if mode != ExecMode.LIVE and journal_path is None:
        return Result(
            diagnostics=[
                Diagnostic(
                    code="CONFIG_JOURNAL_REQUIRED",
                    rule="config.journal",
                    severity=Severity.ERROR,
                    message=f"Exec mode '{mode.value}' needs a journal path",
                    location=ValueLocation("mode", mode.value),
                    hint=f"Set {JOURNAL_ENV} or [exec] journal in {CONFIG_FILENAME}",
                )
            ]
        )

    return Result(
        value=ExecSettings(
            mode=mode,
            journal_path=journal_path,
        )
    )
