from __future__ import annotations

import re
from dataclasses import dataclass

from srnv.release.model import PREVIEW_MARKER


# SemVer 2.0.0, tolerating a leading "v" or "=" the way npm's semver does.
_SEMVER_RE = re.compile(
    r"^[v=]*"
    r"(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*))*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    build: str | None = None

    def base(self) -> str:
        """``major.minor.patch`` without prerelease or build metadata."""
        return f"{self.major}.{self.minor}.{self.patch}"

    def with_preview(self, token: str) -> str:
        return f"{self.base()}-{PREVIEW_MARKER}-{token}"

    def __str__(self) -> str:
        text = self.base()
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text


def parse_version(text: str) -> SemVer | None:
    m = _SEMVER_RE.match(text.strip())
    if m is None:
        return None
    return SemVer(
        int(m.group(1)),
        int(m.group(2)),
        int(m.group(3)),
        prerelease=m.group(4),
        build=m.group(5),
    )
