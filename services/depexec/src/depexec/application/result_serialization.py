from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from typing import TypeVar

from depexec.application.rendering import to_diagnostic
from depexec.domain.determinism import EPOCH_TIMESTAMP, is_deterministic
from depexec.domain.diagnostics import Diagnostic, Location
from depexec.domain.exec_errors import ExecErr
from depexec.domain.json_types import JsonDict, as_json_dict
from depexec.domain.result import Result

T = TypeVar("T")

RESULT_SCHEMA_VERSION = 1


def _timestamp() -> str:
    if is_deterministic():
        return EPOCH_TIMESTAMP
    return datetime.now(timezone.utc).isoformat()


def _serialize_location(location: Location | None) -> JsonDict | None:
    if location is None:
        return None
    if is_dataclass(location):
        return as_json_dict(asdict(location))
    return as_json_dict({"kind": str(getattr(location, "kind", "unknown"))})


def serialize_diagnostic(diag: Diagnostic) -> JsonDict:
    return as_json_dict(
        {
            "id": diag.id,
            "code": diag.code,
            "rule": diag.rule,
            "severity": diag.severity.value,
            "message": diag.message,
            "hint": diag.hint,
            "details": diag.details,
            "is_execution": diag.is_execution,
            "location": _serialize_location(diag.location),
        }
    )


def serialize_result(
    result: Result[T],
    command: str,
    args: list[str],
) -> JsonDict:
    return as_json_dict(
        {
            "result_schema_version": RESULT_SCHEMA_VERSION,
            "timestamp": _timestamp(),
            "command": command,
            "args": args,
            "exit_code": result.exit_code,
            "diagnostics": [serialize_diagnostic(d) for d in result.diagnostics],
        }
    )


def serialize_failure_report(err: ExecErr, command: str, args: list[str]) -> JsonDict:
    """Persistable report for one escalated command failure."""
    return serialize_result(Result(diagnostics=[to_diagnostic(err)]), command, args)
