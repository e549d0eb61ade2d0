from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from depexec.domain.diagnostics import Diagnostic, Severity

T = TypeVar("T")

VALIDATION_EXIT_CODE = 2
EXECUTION_EXIT_CODE = 3


def _new_diagnostics() -> list[Diagnostic]:
    return []


@dataclass
class Result(Generic[T]):
    value: T | None = None
    diagnostics: list[Diagnostic] = field(default_factory=_new_diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def exit_code(self) -> int:
        if any(d.is_execution for d in self.errors):
            return EXECUTION_EXIT_CODE
        if self.errors:
            return VALIDATION_EXIT_CODE
        return 0
