"""Next-version resolution on top of semantic-release."""

from srnv.release.errors import NextVersionError, ReleaseError
from srnv.release.model import ReleaseDecision, ResolutionRequest, TempRemote
from srnv.release.resolver import resolve_next_version

__all__ = [
    "NextVersionError",
    "ReleaseDecision",
    "ReleaseError",
    "ResolutionRequest",
    "TempRemote",
    "resolve_next_version",
]
