from __future__ import annotations

from depexec.adapters.exec.journal import Journal
from depexec.domain.command import Command, ExceptionText, RawCommand
from depexec.domain.failure import CmdFailure
from depexec.domain.outcome import Outcome
from depexec.ports.exec import Directory, ExecPort


class RecordingExec:
    """Delegates to another interpreter and journals every outcome."""

    def __init__(self, inner: ExecPort, journal: Journal | None = None) -> None:
        self.inner = inner
        self.journal = journal if journal is not None else Journal()

    def run(self, directory: Directory, command: Command) -> Outcome[bytes, CmdFailure]:
        outcome = self.inner.run(directory, command)
        self.journal.record(directory, command, outcome)
        return outcome

    def run_raw(
        self, directory: Directory, command: RawCommand
    ) -> Outcome[int, ExceptionText]:
        outcome = self.inner.run_raw(directory, command)
        self.journal.record(directory, command, outcome)
        return outcome
