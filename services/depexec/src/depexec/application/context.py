"""Labelled error frames for command failures.

`fatal` aborts the current computation with a typed `ExecErr`; every
enclosing `context` block prepends its label on the way out, so the final
error reads outermost-first, like a stack of "while doing X" notes.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, NoReturn

from depexec.application.rendering import render_exec_err
from depexec.domain.exec_errors import ExecErr


class ExecFatal(Exception):
    def __init__(self, error: ExecErr, frames: list[str] | None = None) -> None:
        super().__init__(error)
        self.error = error
        self.frames: list[str] = list(frames or [])

    def __str__(self) -> str:
        return self.render()

    def render(self) -> str:
        lines = [f"while: {frame}" for frame in self.frames]
        if lines:
            lines.append("")
        lines.append(render_exec_err(self.error))
        return "\n".join(lines)


def fatal(error: ExecErr) -> NoReturn:
    raise ExecFatal(error)


@contextmanager
def context(label: str) -> Iterator[None]:
    try:
        yield
    except ExecFatal as e:
        e.frames.insert(0, label)
        raise
