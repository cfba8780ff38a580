"""Compute the next semantic-release version without publishing anything.

Usage:
    from srnv import get_next_version

    get_next_version()                # "1.4.0-preview-3f2c1ab"
    get_next_version(release=True)    # "1.4.0"
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from srnv.core.config import DEFAULT_MAIN_BRANCH
from srnv.core.result import Err
from srnv.output.console import ConsoleProtocol
from srnv.release.engine import ReleaseEngine
from srnv.release.errors import NextVersionError, ReleaseError
from srnv.release.model import BranchInput, ResolutionRequest
from srnv.release.resolver import resolve_next_version

__version__ = "0.3.0"

__all__ = [
    "NextVersionError",
    "ReleaseError",
    "ResolutionRequest",
    "__version__",
    "get_next_version",
    "resolve",
]

resolve = resolve_next_version


def get_next_version(
    *,
    cwd: Path | str | None = None,
    release: bool = False,
    main_branch: str = DEFAULT_MAIN_BRANCH,
    repository_url: str | None = None,
    branches: BranchInput | None = None,
    tag_format: str | None = None,
    plugins: list[object] | None = None,
    config: Mapping[str, object] | None = None,
    engine: ReleaseEngine | None = None,
    console: ConsoleProtocol | None = None,
) -> str:
    """Resolve the next version, raising on failure.

    Raises:
        NextVersionError: No usable version; ``str(exc)`` is the reason.
    """
    request = ResolutionRequest(
        cwd=Path(cwd) if cwd is not None else Path.cwd(),
        release=release,
        main_branch=main_branch,
        repository_url=repository_url,
        branches=branches,
        tag_format=tag_format,
        plugins=plugins,
        config=dict(config or {}),
    )
    result = resolve_next_version(request, engine=engine, console=console)
    if isinstance(result, Err):
        raise NextVersionError(result.error)
    return result.value
