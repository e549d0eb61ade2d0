from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

from depexec.domain.command import Command

SUCCESS_EXIT_CODE = 0
LAUNCH_FAILURE_EXIT_CODE = 1


class LaunchErrorKind(str, Enum):
    """Why the OS refused to start a process at all."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    DIRECTORY_NOT_FOUND = "directory_not_found"
    OTHER = "other"

    @classmethod
    def from_os_error(cls, exc: OSError, directory: str) -> "LaunchErrorKind":
        if isinstance(exc, (FileNotFoundError, NotADirectoryError)):
            # subprocess reports a bad cwd with the directory as the filename
            if exc.filename is not None and str(exc.filename) == directory:
                return cls.DIRECTORY_NOT_FOUND
            return cls.NOT_FOUND
        if isinstance(exc, PermissionError):
            return cls.PERMISSION_DENIED
        return cls.OTHER


@total_ordering
@dataclass(frozen=True, eq=True)
class CmdFailure:
    """Snapshot of a failed `run` invocation, taken once by the interpreter."""

    command: Command
    directory: str
    exit_code: int
    stdout: bytes
    stderr: bytes
    launch_error: LaunchErrorKind | None = None

    def _sort_key(self) -> tuple[Command, str, int, bytes, bytes, str]:
        launch = self.launch_error.value if self.launch_error is not None else ""
        return (
            self.command,
            self.directory,
            self.exit_code,
            self.stdout,
            self.stderr,
            launch,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CmdFailure):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    @property
    def is_launch_failure(self) -> bool:
        return self.launch_error is not None
