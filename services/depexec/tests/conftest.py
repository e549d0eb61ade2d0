import sys
from typing import Callable

import pytest

from depexec.adapters.exec.journal import Journal
from depexec.adapters.exec.replay import ReplayExec
from depexec.domain.command import AllowErr, Command


def python_command(code: str, allow_err: AllowErr = AllowErr.NEVER) -> Command:
    return Command(sys.executable, ("-c", code), allow_err)


@pytest.fixture
def py() -> Callable[..., Command]:
    return python_command


@pytest.fixture
def scripted_exec() -> Callable[..., ReplayExec]:
    """Build a replaying interpreter from `(directory, command, outcome)` triples."""

    def build(*entries) -> ReplayExec:
        journal = Journal()
        for directory, command, outcome in entries:
            journal.record(directory, command, outcome)
        return ReplayExec(journal)

    return build
