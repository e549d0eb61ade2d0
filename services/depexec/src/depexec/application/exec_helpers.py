"""Throwing wrappers over `ExecPort` for call sites with no fallback path.

`ExecPort.run`/`run_raw` return outcomes so callers can try alternatives
(`pip3` after `pip`, say). The helpers here escalate failures through
`fatal` instead, each inside a context frame naming the command.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, TypeVar

import jsonschema

from depexec.application.context import context, fatal
from depexec.domain.command import Command, ExceptionText, RawCommand, render_command
from depexec.domain.exec_errors import (
    CommandFailed,
    CommandParseError,
    RawException,
    RawExitFailure,
)
from depexec.domain.failure import SUCCESS_EXIT_CODE, CmdFailure
from depexec.domain.json_types import JsonDict, JsonValue
from depexec.domain.outcome import Err, Outcome
from depexec.ports.current_dir import CurrentDirPort
from depexec.ports.exec import Directory, ExecPort

T = TypeVar("T")

Grammar = Callable[[str], T]

logger = logging.getLogger(__name__)


def _label(command: Command | RawCommand) -> str:
    return f"Running command '{render_command(command)}'"


def decode_stdout(stdout: bytes) -> str:
    return stdout.decode("utf-8", errors="replace")


def run_cwd(
    exec_port: ExecPort, command: Command, current_dir: CurrentDirPort
) -> Outcome[bytes, CmdFailure]:
    return exec_port.run(current_dir.get_current_dir(), command)


def exec_throw(exec_port: ExecPort, directory: Directory, command: Command) -> bytes:
    with context(_label(command)):
        outcome = exec_port.run(directory, command)
        if isinstance(outcome, Err):
            fatal(CommandFailed(outcome.error))
        return outcome.value


def exec_throw_cwd(
    exec_port: ExecPort, command: Command, current_dir: CurrentDirPort
) -> bytes:
    return exec_throw(exec_port, current_dir.get_current_dir(), command)


def raw_exec_throw(
    exec_port: ExecPort, directory: Directory, command: RawCommand
) -> None:
    with context(_label(command)):
        outcome: Outcome[int, ExceptionText] = exec_port.run_raw(directory, command)
        if isinstance(outcome, Err):
            fatal(RawException(outcome.error))
        if outcome.value != SUCCESS_EXIT_CODE:
            fatal(RawExitFailure(outcome.value))


def exec_parser(
    grammar: Grammar[T],
    exec_port: ExecPort,
    directory: Directory,
    command: Command,
) -> T:
    """Run `command` and parse its stdout with `grammar`.

    Any exception raised by the grammar is treated as a parse failure and
    reported with the grammar's own message.
    """
    stdout = exec_throw(exec_port, directory, command)
    try:
        return grammar(decode_stdout(stdout))
    except Exception as e:  # grammar libraries raise their own error types
        logger.debug("parser rejected output of %r: %s", command.name, e)
        fatal(CommandParseError(command, str(e)))


def exec_json(
    exec_port: ExecPort,
    directory: Directory,
    command: Command,
    schema: JsonDict | None = None,
    decode: Callable[[JsonValue], T] | None = None,
) -> Any:
    """Run `command` and decode its stdout as JSON.

    When `schema` is given the document must validate against it; when
    `decode` is given its return value is the result.
    """
    stdout = exec_throw(exec_port, directory, command)
    try:
        document: JsonValue = json.loads(stdout)
    except ValueError as e:
        fatal(CommandParseError(command, str(e)))
    if schema is not None:
        try:
            jsonschema.validate(document, schema)
        except jsonschema.ValidationError as e:
            fatal(CommandParseError(command, e.message))
    if decode is None:
        return document
    try:
        return decode(document)
    except Exception as e:  # decoders fail with whatever the document shape provokes
        logger.debug("decoder rejected output of %r: %s", command.name, e)
        fatal(CommandParseError(command, f"{type(e).__name__}: {e}"))
