from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from srnv.core.config import DEFAULT_MAIN_BRANCH
from srnv.core.result import Result
from srnv.git.repository import GitError


# A branch entry as semantic-release understands it: a bare name, or a table
# such as {"name": "next", "prerelease": "rc"}.
BranchSpec = str | Mapping[str, object]
BranchInput = BranchSpec | list[BranchSpec] | tuple[BranchSpec, ...]
BranchList = list[BranchSpec]

DEFAULT_TAG_FORMAT = "${version}"
DEFAULT_PLUGINS: tuple[str, ...] = ("@semantic-release/commit-analyzer",)

PREVIEW_MARKER = "preview"


def _empty_config() -> Mapping[str, object]:
    return MappingProxyType({})


def _default_cwd() -> Path:
    return Path.cwd()


@dataclass(frozen=True, slots=True)
class ResolutionRequest:
    """Input to one version resolution.

    Attributes:
        cwd: Repository working directory.
        release: Return plain ``x.y.z`` instead of a preview version.
        main_branch: Branch released without a prerelease channel.
        repository_url: Repository URL override (wins over ``config``).
        branches: Branch configuration override.
        tag_format: Tag format override.
        plugins: Plugin list override.
        config: Raw semantic-release options merged over the defaults.
    """

    cwd: Path = field(default_factory=_default_cwd)
    release: bool = False
    main_branch: str = DEFAULT_MAIN_BRANCH
    repository_url: str | None = None
    branches: BranchInput | None = None
    tag_format: str | None = None
    plugins: list[object] | None = None
    config: Mapping[str, object] = field(default_factory=_empty_config)


@dataclass(frozen=True, slots=True)
class RepositoryIdentity:
    """What git (or CI) reports about the checkout.

    Each lookup is independent; one failing does not affect the others.
    A lookup the resolution has no use for is left as None.
    """

    current_branch: Result[str, GitError]
    remote_origin_url: Result[str, GitError] | None = None
    short_commit_hash: Result[str, GitError] | None = None


@dataclass(frozen=True, slots=True)
class TempRemote:
    """A throwaway bare repository mirroring the local refs."""

    remote_path: Path
    temp_root: Path

    @property
    def url(self) -> str:
        return str(self.remote_path)


@dataclass(frozen=True, slots=True)
class ReleaseDecision:
    """The engine's ``nextRelease`` answer. Not yet validated."""

    version: str
    git_tag: str | None = None
    channel: str | None = None
    type: str | None = None
