from __future__ import annotations

from dataclasses import dataclass

from depexec.adapters.errors import JournalReadError
from depexec.adapters.exec.journal import Journal
from depexec.adapters.exec.recording import RecordingExec
from depexec.adapters.exec.replay import ReplayExec
from depexec.adapters.exec.subprocess_exec import SubprocessExec
from depexec.application.settings import ExecMode, ExecSettings
from depexec.ports.current_dir import CurrentDirPort
from depexec.ports.exec import ExecPort


@dataclass
class ExecSession:
    exec_port: ExecPort
    settings: ExecSettings

    def close(self) -> None:
        """Persist a recorded journal, or fail a replay that missed fixtures."""
        if isinstance(self.exec_port, RecordingExec) and self.settings.journal_path:
            self.exec_port.journal.dump(self.settings.journal_path)
        elif isinstance(self.exec_port, ReplayExec):
            self.exec_port.verify()


def build_exec(
    settings: ExecSettings, current_dir: CurrentDirPort | None = None
) -> ExecSession:
    if settings.mode == ExecMode.REPLAY:
        if settings.journal_path is None:
            raise JournalReadError(
                "Replay mode needs a journal path",
                hint="Set DEPEXEC_JOURNAL or [exec] journal in .depexec.toml",
            )
        return ExecSession(ReplayExec.from_file(settings.journal_path), settings)
    live = SubprocessExec(current_dir=current_dir)
    if settings.mode == ExecMode.RECORD:
        journal = Journal()
        if settings.journal_path is not None and settings.journal_path.exists():
            journal = Journal.load(settings.journal_path)
        return ExecSession(RecordingExec(live, journal), settings)
    return ExecSession(live, settings)
