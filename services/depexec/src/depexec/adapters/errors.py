from dataclasses import dataclass

from depexec.domain.json_types import JsonDict


@dataclass
class AdapterError(Exception):
    message: str
    details: JsonDict | None = None
    hint: str | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message


class JournalReadError(AdapterError):
    pass


class JournalParseError(AdapterError):
    pass


class JournalWriteError(AdapterError):
    pass


class JournalMissError(AdapterError):
    """A replayed invocation has no recorded fixture.

    This is a test-authoring defect: the session must fail rather than fall
    back to running the command for real.
    """
