from __future__ import annotations

import logging
import os
from pathlib import Path
import threading

from depexec.adapters.errors import JournalMissError
from depexec.adapters.exec.journal import Invocation, Journal, RecordedOutcome, encode_invocation
from depexec.domain.command import Command, ExceptionText, RawCommand, render_command
from depexec.domain.failure import CmdFailure
from depexec.domain.outcome import Outcome
from depexec.ports.exec import Directory

logger = logging.getLogger(__name__)


class ReplayExec:
    """Answers invocations from a recorded journal without spawning anything.

    A miss raises `JournalMissError` and is also remembered, so `verify()`
    fails the session even when the caller swallowed the first error.
    """

    def __init__(self, journal: Journal) -> None:
        self.journal = journal if journal.frozen else journal.freeze()
        self._misses: list[tuple[str, Invocation]] = []
        self._lock = threading.Lock()

    @classmethod
    def from_file(cls, path: Path) -> "ReplayExec":
        return cls(Journal.load(path))

    @property
    def misses(self) -> list[tuple[str, Invocation]]:
        with self._lock:
            return list(self._misses)

    def _replay(self, directory: Directory, invocation: Invocation) -> RecordedOutcome:
        outcome = self.journal.lookup(directory, invocation)
        if outcome is None:
            directory_text = os.fspath(directory)
            with self._lock:
                self._misses.append((directory_text, invocation))
            logger.error(
                "no recorded outcome for %r in %s",
                render_command(invocation),
                directory_text,
            )
            raise JournalMissError(
                f"No recorded outcome for '{render_command(invocation)}' in {directory_text}",
                details={
                    "directory": directory_text,
                    "invocation": encode_invocation(invocation),
                },
                hint="Re-record the journal with DEPEXEC_MODE=record",
            )
        return outcome

    def run(self, directory: Directory, command: Command) -> Outcome[bytes, CmdFailure]:
        return self._replay(directory, command)  # type: ignore[return-value]

    def run_raw(
        self, directory: Directory, command: RawCommand
    ) -> Outcome[int, ExceptionText]:
        return self._replay(directory, command)  # type: ignore[return-value]

    def verify(self) -> None:
        misses = self.misses
        if not misses:
            return
        lines = [f"  {render_command(inv)} (in {directory})" for directory, inv in misses]
        raise JournalMissError(
            f"{len(misses)} invocation(s) missing from the replay journal:\n"
            + "\n".join(lines),
            details={"missing": len(misses)},
        )
