from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from depexec.domain.command import Command, ExceptionText
from depexec.domain.failure import CmdFailure


@dataclass(frozen=True)
class CommandFailed:
    """Command execution failed, usually from a nonzero exit."""

    failure: CmdFailure


@dataclass(frozen=True)
class CommandParseError:
    """Command output could not be parsed."""

    command: Command
    message: str


@dataclass(frozen=True)
class RawException:
    """Command with inherited stdio could not be started."""

    exception: ExceptionText


@dataclass(frozen=True)
class RawExitFailure:
    """Command with inherited stdio exited nonzero."""

    exit_code: int


ExecErr: TypeAlias = CommandFailed | CommandParseError | RawException | RawExitFailure
