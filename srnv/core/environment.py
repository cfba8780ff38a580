"""Immutable snapshot of the CI-relevant process environment.

The resolver takes one snapshot at the start of a resolution and passes it
around explicitly. ``os.environ`` is never mutated, so concurrent
resolutions in one process cannot see each other's pull-request fix-ups.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

__all__ = [
    "CiEnvironment",
    "GIT_TOKEN_VARIABLES",
    "NOTES_ENV_OVERRIDES",
]

GIT_TOKEN_VARIABLES: tuple[str, ...] = ("GITHUB_TOKEN", "GH_TOKEN", "GIT_TOKEN")

# Stray git notes break semantic-release's tag parsing.
NOTES_ENV_OVERRIDES: Mapping[str, str] = MappingProxyType(
    {
        "GIT_NOTE_REF": "semantic-release-next-version-empty",
        "GIT_NOTES_REF": "",
        "GIT_NOTES_DISPLAY_REF": "",
    }
)

_PULL_REF_PREFIX = "refs/pull/"


def _empty_vars() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class CiEnvironment:
    """Read-only view of environment variables.

    Attributes:
        variables: The captured variables.
    """

    variables: Mapping[str, str] = field(default_factory=_empty_vars)

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> CiEnvironment:
        """Capture ``environ`` (default: ``os.environ``) as a snapshot."""
        source = os.environ if environ is None else environ
        return cls(variables=MappingProxyType(dict(source)))

    def get(self, name: str) -> str:
        """Return a variable's value, or "" when unset."""
        return self.variables.get(name, "")

    @property
    def head_ref(self) -> str:
        return self.get("GITHUB_HEAD_REF")

    @property
    def ref(self) -> str:
        return self.get("GITHUB_REF")

    @property
    def ref_name(self) -> str:
        return self.get("GITHUB_REF_NAME")

    @property
    def sha(self) -> str:
        return self.get("GITHUB_SHA")

    @property
    def is_pull_request_ref(self) -> bool:
        return bool(self.head_ref) and self.ref.startswith(_PULL_REF_PREFIX)

    def corrected(self) -> CiEnvironment:
        """Point GITHUB_REF/GITHUB_REF_NAME at the PR source branch.

        On pull_request events GitHub sets GITHUB_REF to the synthetic
        ``refs/pull/<n>/merge`` ref. Branch inference downstream (ours and the
        engine's CI detection) must see the head branch instead.
        """
        if not self.is_pull_request_ref:
            return self
        head = self.head_ref
        updated = dict(self.variables)
        updated["GITHUB_REF"] = f"refs/heads/{head}"
        updated["GITHUB_REF_NAME"] = head
        return CiEnvironment(variables=MappingProxyType(updated))

    def has_git_token(self) -> bool:
        """True when a git-hosting credential variable is set."""
        return any(self.get(name) for name in GIT_TOKEN_VARIABLES)

    def engine_env(self) -> dict[str, str]:
        """Environment handed to the release engine, git notes neutralized."""
        env = dict(self.variables)
        env.update(NOTES_ENV_OVERRIDES)
        return env

    def as_dict(self) -> dict[str, str]:
        return dict(self.variables)
