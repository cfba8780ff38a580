"""``Ok`` / ``Err`` values for steps that can fail without it being fatal.

A git lookup that fails is not an error for the resolver; it is a signal to
use the fallback. Returning ``Err`` keeps "lookup failed" distinct from
"lookup returned an empty string", and ``unwrap_or`` applies the fallback
in one expression::

    origin = repo.remote_origin_url().unwrap_or("")

Callers that need the error payload pattern-match instead::

    match load_config(path):
        case Ok(config):
            ...
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def unwrap(self) -> None:
        """Raises ValueError carrying the error payload."""
        raise ValueError(f"unwrap() on Err({self.error!r})")

    def unwrap_or(self, default: T) -> T:
        return default

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
