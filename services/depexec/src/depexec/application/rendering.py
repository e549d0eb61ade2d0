from __future__ import annotations

import textwrap

from depexec.domain.codec import encode_exec_err
from depexec.domain.command import AllowErr, render_command
from depexec.domain.diagnostics import CommandLocation, Diagnostic, Severity
from depexec.domain.exec_errors import (
    CommandFailed,
    CommandParseError,
    ExecErr,
    RawException,
)
from depexec.domain.failure import CmdFailure, LaunchErrorKind

DEFECT_FOOTER = (
    "If you believe this to be a defect, please report it to the depexec "
    "maintainers with the output above."
)

EXEC_CODES: dict[str, str] = {
    "EXEC_COMMAND_FAILED": "exec.command.exit",
    "EXEC_EXECUTABLE_NOT_FOUND": "exec.command.launch",
    "EXEC_PERMISSION_DENIED": "exec.command.launch",
    "EXEC_DIRECTORY_NOT_FOUND": "exec.command.launch",
    "EXEC_LAUNCH_FAILED": "exec.command.launch",
    "EXEC_OUTPUT_PARSE_FAILED": "exec.command.parse",
    "EXEC_RAW_LAUNCH_FAILED": "exec.raw.launch",
    "EXEC_RAW_EXIT_FAILURE": "exec.raw.exit",
}

_LAUNCH_CODES = {
    LaunchErrorKind.NOT_FOUND: "EXEC_EXECUTABLE_NOT_FOUND",
    LaunchErrorKind.PERMISSION_DENIED: "EXEC_PERMISSION_DENIED",
    LaunchErrorKind.DIRECTORY_NOT_FOUND: "EXEC_DIRECTORY_NOT_FOUND",
    LaunchErrorKind.OTHER: "EXEC_LAUNCH_FAILED",
}


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _with_footer(lines: list[str], footer: str | None) -> str:
    if footer:
        lines = [*lines, "", footer]
    return "\n".join(lines)


def _launch_lines(failure: CmdFailure) -> list[str] | None:
    name = failure.command.name
    if failure.launch_error == LaunchErrorKind.NOT_FOUND:
        return [
            f"Could not find executable: `{name}`.",
            "",
            f"Please ensure `{name}` exists in PATH prior to running depexec.",
        ]
    if failure.launch_error == LaunchErrorKind.PERMISSION_DENIED:
        return [
            f"Could not execute `{name}`: permission denied.",
            "",
            f"Please ensure `{name}` is executable by the current user.",
        ]
    if failure.launch_error == LaunchErrorKind.DIRECTORY_NOT_FOUND:
        return [
            f"Could not run `{name}`: working directory does not exist.",
            "",
            f"Please ensure `{failure.directory}` exists before running the command.",
        ]
    return None


def render_cmd_failure(failure: CmdFailure, footer: str | None = DEFECT_FOOTER) -> str:
    launch = _launch_lines(failure)
    if launch is not None:
        return _with_footer(launch, footer)
    block = "\n".join(
        [
            f"command: {render_command(failure.command)}",
            f"dir: {failure.directory}",
            f"exit: {failure.exit_code}",
            "stdout:",
            textwrap.indent(_decode(failure.stdout), "  "),
            "stderr:",
            textwrap.indent(_decode(failure.stderr), "  "),
        ]
    )
    return _with_footer(
        ["Command execution failed:", textwrap.indent(block, "    ")], footer
    )


def render_exec_err(err: ExecErr, footer: str | None = DEFECT_FOOTER) -> str:
    if isinstance(err, CommandFailed):
        return render_cmd_failure(err.failure, footer)
    if isinstance(err, CommandParseError):
        return _with_footer(
            [
                f"Failed to parse command output. command: {render_command(err.command)}.",
                "",
                textwrap.indent(err.message, "    "),
            ],
            footer,
        )
    if isinstance(err, RawException):
        return err.exception.text
    return f"Failed to run command. Exit code: {err.exit_code}."


def diagnostic_code(err: ExecErr) -> str:
    if isinstance(err, CommandFailed):
        kind = err.failure.launch_error
        return _LAUNCH_CODES[kind] if kind is not None else "EXEC_COMMAND_FAILED"
    if isinstance(err, CommandParseError):
        return "EXEC_OUTPUT_PARSE_FAILED"
    if isinstance(err, RawException):
        return "EXEC_RAW_LAUNCH_FAILED"
    return "EXEC_RAW_EXIT_FAILURE"


def _hint(err: ExecErr) -> str | None:
    if isinstance(err, CommandFailed):
        launch = _launch_lines(err.failure)
        if launch is not None:
            return launch[-1]
        if err.failure.command.allow_err == AllowErr.NEVER:
            return "If this tool exits nonzero on success, run it with a tolerant allow_err policy"
    return None


def _location(err: ExecErr) -> CommandLocation | None:
    if isinstance(err, CommandFailed):
        return CommandLocation(render_command(err.failure.command), err.failure.directory)
    if isinstance(err, CommandParseError):
        return CommandLocation(render_command(err.command))
    return None


def to_diagnostic(err: ExecErr) -> Diagnostic:
    code = diagnostic_code(err)
    return Diagnostic(
        code=code,
        rule=EXEC_CODES[code],
        severity=Severity.ERROR,
        message=render_exec_err(err, footer=None),
        location=_location(err),
        hint=_hint(err),
        details=encode_exec_err(err),
        is_execution=True,
    )
