from __future__ import annotations

from depexec.domain.command import AllowErr, Command
from depexec.domain.failure import SUCCESS_EXIT_CODE, CmdFailure
from depexec.domain.outcome import Err, Ok, Outcome


def decide_outcome(exit_code: int, stdout: bytes, allow_err: AllowErr) -> bool:
    if exit_code == SUCCESS_EXIT_CODE:
        return True
    if allow_err == AllowErr.NEVER:
        return False
    if allow_err == AllowErr.NON_EMPTY_STDOUT:
        return len(stdout) > 0
    return True


def apply_policy(
    command: Command,
    directory: str,
    exit_code: int,
    stdout: bytes,
    stderr: bytes,
) -> Outcome[bytes, CmdFailure]:
    if decide_outcome(exit_code, stdout, command.allow_err):
        return Ok(stdout)
    return Err(
        CmdFailure(
            command=command,
            directory=directory,
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
        )
    )
