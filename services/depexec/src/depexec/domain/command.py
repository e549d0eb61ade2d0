from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class AllowErr(str, Enum):
    """Tolerance policy for nonzero exit codes.

    Some tools (npm in particular) exit nonzero even when they did their job,
    so the caller attaches the policy that fits the tool it is wrapping.
    """

    NEVER = "never"
    NON_EMPTY_STDOUT = "non_empty_stdout"
    ALWAYS = "always"


def _as_args(args: Iterable[str]) -> tuple[str, ...]:
    return tuple(str(arg) for arg in args)


@dataclass(frozen=True, order=True)
class Command:
    name: str
    args: tuple[str, ...] = ()
    allow_err: AllowErr = AllowErr.NEVER

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", _as_args(self.args))
        object.__setattr__(self, "allow_err", AllowErr(self.allow_err))


@dataclass(frozen=True, order=True)
class RawCommand:
    name: str
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", _as_args(self.args))


@dataclass(frozen=True, order=True)
class ExceptionText:
    text: str

    def __str__(self) -> str:
        return self.text


def render_command(command: Command | RawCommand) -> str:
    return " ".join([command.name, *command.args])
