from os import PathLike
from typing import Protocol, TypeAlias

from depexec.domain.command import Command, ExceptionText, RawCommand
from depexec.domain.failure import CmdFailure
from depexec.domain.outcome import Outcome

Directory: TypeAlias = "str | PathLike[str]"


class ExecPort(Protocol):
    def run(
        self, directory: Directory, command: Command
    ) -> Outcome[bytes, CmdFailure]: ...

    def run_raw(
        self, directory: Directory, command: RawCommand
    ) -> Outcome[int, ExceptionText]: ...
