"""Stable JSON encodings for commands, failures and recorded outcomes.

Field order and tag names here are a persisted format: replay journals and
failure reports written by one version must decode with the next one.
"""

from __future__ import annotations

import base64
import binascii

from depexec.domain.command import AllowErr, Command, ExceptionText, RawCommand
from depexec.domain.exec_errors import (
    CommandFailed,
    CommandParseError,
    ExecErr,
    RawException,
    RawExitFailure,
)
from depexec.domain.failure import SUCCESS_EXIT_CODE, CmdFailure, LaunchErrorKind
from depexec.domain.json_types import JsonDict
from depexec.domain.outcome import Err, Ok, Outcome


class CodecError(ValueError):
    pass


def _require_dict(raw: object, what: str) -> dict[str, object]:
    if not isinstance(raw, dict):
        raise CodecError(f"{what}: expected an object, got {type(raw).__name__}")
    return {str(k): v for k, v in raw.items()}


def _require_str(data: dict[str, object], key: str, what: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise CodecError(f"{what}: field '{key}' must be a string")
    return value


def _require_int(data: dict[str, object], key: str, what: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise CodecError(f"{what}: field '{key}' must be an integer")
    return value


def _require_str_list(data: dict[str, object], key: str, what: str) -> list[str]:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise CodecError(f"{what}: field '{key}' must be a list of strings")
    return [str(v) for v in value]


def encode_bytes(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def decode_bytes(raw: object) -> bytes:
    if not isinstance(raw, str):
        raise CodecError("bytes: expected base64 text")
    try:
        return base64.b64decode(raw.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise CodecError(f"bytes: invalid base64: {e}") from e


def encode_allow_err(allow_err: AllowErr) -> str:
    return allow_err.value


def decode_allow_err(raw: object) -> AllowErr:
    try:
        return AllowErr(raw)
    except ValueError as e:
        raise CodecError(f"allow_err: unknown policy {raw!r}") from e


def encode_command(command: Command) -> JsonDict:
    return {
        "name": command.name,
        "args": list(command.args),
        "allow_err": encode_allow_err(command.allow_err),
    }


def decode_command(raw: object) -> Command:
    data = _require_dict(raw, "command")
    return Command(
        name=_require_str(data, "name", "command"),
        args=tuple(_require_str_list(data, "args", "command")),
        allow_err=decode_allow_err(data.get("allow_err")),
    )


def encode_raw_command(command: RawCommand) -> JsonDict:
    return {"name": command.name, "args": list(command.args)}


def decode_raw_command(raw: object) -> RawCommand:
    data = _require_dict(raw, "raw_command")
    return RawCommand(
        name=_require_str(data, "name", "raw_command"),
        args=tuple(_require_str_list(data, "args", "raw_command")),
    )


def encode_exception_text(exc: ExceptionText) -> str:
    return exc.text


def decode_exception_text(raw: object) -> ExceptionText:
    if not isinstance(raw, str):
        raise CodecError("exception_text: expected a string")
    return ExceptionText(raw)


def encode_exit_code(exit_code: int) -> JsonDict:
    if exit_code == SUCCESS_EXIT_CODE:
        return {"kind": "success"}
    return {"kind": "failure", "code": exit_code}


def decode_exit_code(raw: object) -> int:
    data = _require_dict(raw, "exit_code")
    kind = data.get("kind")
    if kind == "success":
        return SUCCESS_EXIT_CODE
    if kind == "failure":
        code = _require_int(data, "code", "exit_code")
        if code == SUCCESS_EXIT_CODE:
            raise CodecError("exit_code: failure code cannot be 0")
        return code
    raise CodecError(f"exit_code: unknown kind {kind!r}")


def encode_cmd_failure(failure: CmdFailure) -> JsonDict:
    data: JsonDict = {
        "command": encode_command(failure.command),
        "directory": failure.directory,
        "exit_code": encode_exit_code(failure.exit_code),
        "stdout": encode_bytes(failure.stdout),
        "stderr": encode_bytes(failure.stderr),
    }
    if failure.launch_error is not None:
        data["launch_error"] = failure.launch_error.value
    return data


def decode_cmd_failure(raw: object) -> CmdFailure:
    data = _require_dict(raw, "cmd_failure")
    launch_raw = data.get("launch_error")
    launch_error: LaunchErrorKind | None = None
    if launch_raw is not None:
        try:
            launch_error = LaunchErrorKind(launch_raw)
        except ValueError as e:
            raise CodecError(f"cmd_failure: unknown launch_error {launch_raw!r}") from e
    return CmdFailure(
        command=decode_command(data.get("command")),
        directory=_require_str(data, "directory", "cmd_failure"),
        exit_code=decode_exit_code(data.get("exit_code")),
        stdout=decode_bytes(data.get("stdout")),
        stderr=decode_bytes(data.get("stderr")),
        launch_error=launch_error,
    )


def encode_run_outcome(outcome: Outcome[bytes, CmdFailure]) -> JsonDict:
    if isinstance(outcome, Ok):
        return {"status": "ok", "stdout": encode_bytes(outcome.value)}
    return {"status": "err", "failure": encode_cmd_failure(outcome.error)}


def decode_run_outcome(raw: object) -> Outcome[bytes, CmdFailure]:
    data = _require_dict(raw, "run_outcome")
    status = data.get("status")
    if status == "ok":
        return Ok(decode_bytes(data.get("stdout")))
    if status == "err":
        return Err(decode_cmd_failure(data.get("failure")))
    raise CodecError(f"run_outcome: unknown status {status!r}")


def encode_raw_outcome(outcome: Outcome[int, ExceptionText]) -> JsonDict:
    if isinstance(outcome, Ok):
        return {"status": "ok", "exit_code": encode_exit_code(outcome.value)}
    return {"status": "err", "exception": encode_exception_text(outcome.error)}


def decode_raw_outcome(raw: object) -> Outcome[int, ExceptionText]:
    data = _require_dict(raw, "raw_outcome")
    status = data.get("status")
    if status == "ok":
        return Ok(decode_exit_code(data.get("exit_code")))
    if status == "err":
        return Err(decode_exception_text(data.get("exception")))
    raise CodecError(f"raw_outcome: unknown status {status!r}")


def encode_exec_err(err: ExecErr) -> JsonDict:
    if isinstance(err, CommandFailed):
        return {"kind": "command_failed", "failure": encode_cmd_failure(err.failure)}
    if isinstance(err, CommandParseError):
        return {
            "kind": "command_parse_error",
            "command": encode_command(err.command),
            "message": err.message,
        }
    if isinstance(err, RawException):
        return {"kind": "raw_exception", "exception": encode_exception_text(err.exception)}
    return {"kind": "raw_exit_failure", "exit_code": err.exit_code}


def decode_exec_err(raw: object) -> ExecErr:
    data = _require_dict(raw, "exec_err")
    kind = data.get("kind")
    if kind == "command_failed":
        return CommandFailed(decode_cmd_failure(data.get("failure")))
    if kind == "command_parse_error":
        return CommandParseError(
            decode_command(data.get("command")),
            _require_str(data, "message", "exec_err"),
        )
    if kind == "raw_exception":
        return RawException(decode_exception_text(data.get("exception")))
    if kind == "raw_exit_failure":
        return RawExitFailure(_require_int(data, "exit_code", "exec_err"))
    raise CodecError(f"exec_err: unknown kind {kind!r}")
