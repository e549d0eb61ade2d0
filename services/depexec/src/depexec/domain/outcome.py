from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, order=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, order=True)
class Err(Generic[E]):
    error: E


Outcome: TypeAlias = Ok[T] | Err[E]
