"""Branch configuration policy.

semantic-release refuses to run on a branch that its ``branches`` option
does not list. These helpers normalize whatever the caller configured into a
list and make sure the branch being built is part of it.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from srnv.release.model import BranchInput, BranchList, BranchSpec

__all__ = [
    "FALLBACK_PRERELEASE_ID",
    "branch_exists",
    "branch_name",
    "ensure_current_branch",
    "normalize_branches",
    "to_prerelease_id",
]

FALLBACK_PRERELEASE_ID = "prerelease"

_INVALID_CHARS_RE = re.compile(r"[^0-9A-Za-z-]")
_HYPHEN_RUN_RE = re.compile(r"-+")


def normalize_branches(value: BranchInput | None) -> BranchList:
    """Return ``value`` as a fresh list.

    None gives an empty list, a single spec a one-element list, and a
    sequence a shallow copy, so appending never touches the caller's object.
    """
    if value is None:
        return []
    if isinstance(value, (str, Mapping)):
        return [value]
    return list(value)


def branch_name(spec: BranchSpec) -> str | None:
    """Name of a branch entry, or None for a table without a string name."""
    if isinstance(spec, str):
        return spec
    name = spec.get("name")
    return name if isinstance(name, str) else None


def branch_exists(branches: Sequence[BranchSpec], name: str) -> bool:
    return any(branch_name(entry) == name for entry in branches)


def to_prerelease_id(name: str) -> str:
    """Turn a branch name into a prerelease identifier.

    >>> to_prerelease_id("feature/cool-thing")
    'feature-cool-thing'
    >>> to_prerelease_id("!!!")
    'prerelease'
    """
    slug = _INVALID_CHARS_RE.sub("-", name)
    slug = _HYPHEN_RUN_RE.sub("-", slug).strip("-")
    return slug or FALLBACK_PRERELEASE_ID


def ensure_current_branch(branches: BranchList, current: str, main: str) -> BranchList:
    """Append an entry for ``current`` unless one is already listed.

    The main branch is added as a release branch; anything else becomes a
    prerelease channel named after the branch. Mutates and returns
    ``branches``.
    """
    if not branch_exists(branches, current):
        prerelease: bool | str = False if current == main else to_prerelease_id(current)
        branches.append({"name": current, "prerelease": prerelease})
    return branches
