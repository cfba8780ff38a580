"""Error types for version resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "no-release",
    "invalid-version",
    "engine",
    "provision",
]

NO_RELEASE_MESSAGE = "semantic-release did not return a next version."


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical resolution error payload.

    ``message`` is what the CLI prints and what ``NextVersionError`` carries.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


def no_release() -> ReleaseError:
    return ReleaseError(kind="no-release", message=NO_RELEASE_MESSAGE)


def invalid_version(raw: object) -> ReleaseError:
    return ReleaseError(
        kind="invalid-version",
        message=f"Unable to parse semantic-release version: {raw}",
    )


class NextVersionError(Exception):
    """Raised by the public API when a version cannot be resolved."""

    def __init__(self, error: ReleaseError) -> None:
        super().__init__(error.message)
        self.error = error

    @property
    def kind(self) -> ReleaseErrorKind:
        return self.error.kind
