"""Next-version resolution.

One call runs a single linear pipeline:

1. snapshot the environment and undo the pull-request ref quirk
2. work out the current branch (falling back to the main branch)
3. pick the repository URL: request > config > origin (release only) > "."
4. decide whether semantic-release needs a disposable local remote
5. assemble the semantic-release options and branch list
6. run semantic-release in dry-run mode, temp remote removed afterwards
7. validate its answer and shape it into ``x.y.z`` or
   ``x.y.z-preview-<token>``

There are no retries. Each external lookup has exactly one fallback.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from srnv.core.environment import CiEnvironment
from srnv.core.result import Err, Ok, Result
from srnv.git.repository import Repository
from srnv.output.console import ConsoleProtocol, RichConsole
from srnv.release.branches import ensure_current_branch, normalize_branches, to_prerelease_id
from srnv.release.engine import ReleaseEngine, SemanticReleaseEngine
from srnv.release.errors import ReleaseError, invalid_version, no_release
from srnv.release.model import (
    DEFAULT_PLUGINS,
    DEFAULT_TAG_FORMAT,
    PREVIEW_MARKER,
    BranchInput,
    BranchList,
    RepositoryIdentity,
    ResolutionRequest,
)
from srnv.release.semver import parse_version
from srnv.release.temp_remote import temp_remote_scope

__all__ = [
    "LOCAL_REPOSITORY_URL",
    "build_engine_options",
    "effective_repository_url",
    "inspect_repository",
    "is_github_http_url",
    "needs_temp_remote",
    "resolve_branches",
    "resolve_next_version",
]

LOCAL_REPOSITORY_URL = "."

_GITHUB_HTTP_RE = re.compile(r"^https?://(?:[^@/]+@)?(?:www\.)?github\.com(?:[:/]|$)", re.IGNORECASE)


def is_github_http_url(url: str) -> bool:
    return _GITHUB_HTTP_RE.match(url) is not None


def effective_repository_url(request: ResolutionRequest, identity: RepositoryIdentity) -> str:
    """Repository URL semantic-release should evaluate.

    The origin URL is only consulted for real releases; previews default to
    the local checkout.
    """
    if request.repository_url:
        return request.repository_url
    configured = request.config.get("repositoryUrl")
    if isinstance(configured, str) and configured:
        return configured
    if request.release and identity.remote_origin_url is not None:
        origin = identity.remote_origin_url.unwrap_or("")
        if origin:
            return origin
    return LOCAL_REPOSITORY_URL


def needs_temp_remote(url: str, *, release: bool, ci: CiEnvironment) -> bool:
    """True when semantic-release should see a local mirror instead of ``url``.

    Previews against ``.`` need one because ``.`` cannot be analysed as a
    remote. Releases against GitHub over HTTP need one when there is no
    token, since semantic-release would fail its push-permission check.
    """
    if not release:
        return url == LOCAL_REPOSITORY_URL
    return is_github_http_url(url) and not ci.has_git_token()


def inspect_repository(repo: Repository, ci: CiEnvironment, *, release: bool) -> RepositoryIdentity:
    """Run the git lookups this resolution needs.

    The origin URL only matters for releases and the commit hash only for
    previews; the other one is never queried.
    """
    return RepositoryIdentity(
        current_branch=repo.current_branch(ci),
        remote_origin_url=repo.remote_origin_url() if release else None,
        short_commit_hash=None if release else repo.short_commit_hash(ci),
    )


def build_engine_options(request: ResolutionRequest, repository_url: str) -> dict[str, object]:
    """Defaults, then ``request.config``, then the explicit overrides."""
    options: dict[str, object] = {
        "repositoryUrl": LOCAL_REPOSITORY_URL,
        "branches": [request.main_branch, {"name": "*", "prerelease": True}],
        "tagFormat": DEFAULT_TAG_FORMAT,
        "plugins": list(DEFAULT_PLUGINS),
    }
    options.update(request.config)
    options["repositoryUrl"] = repository_url
    if request.tag_format:
        options["tagFormat"] = request.tag_format
    if request.plugins is not None:
        options["plugins"] = list(request.plugins)
    return options


def resolve_branches(
    request: ResolutionRequest,
    options: Mapping[str, object],
    current_branch: str,
) -> BranchList:
    """Branch list handed to semantic-release, current branch guaranteed."""
    if request.branches is not None:
        base: object = request.branches
    else:
        base = options.get("branches")
    branches = normalize_branches(_as_branch_input(base))
    return ensure_current_branch(branches, current_branch, request.main_branch)


def _as_branch_input(value: object) -> BranchInput | None:
    if value is None or isinstance(value, (str, Mapping, list, tuple)):
        return value  # type: ignore[return-value]
    return None


def resolve_next_version(
    request: ResolutionRequest,
    *,
    engine: ReleaseEngine | None = None,
    environ: Mapping[str, str] | None = None,
    console: ConsoleProtocol | None = None,
) -> Result[str, ReleaseError]:
    """Compute the next version for ``request.cwd`` without publishing.

    Args:
        request: What to resolve.
        engine: Release-decision engine (default: semantic-release via node).
        environ: Environment to read CI hints from (default: ``os.environ``).
        console: Diagnostic output (default: stderr).

    Returns:
        Ok("x.y.z") for releases, Ok("x.y.z-preview-<token>") otherwise, or
        Err(ReleaseError) when no usable version was produced.
    """
    console = console if console is not None else RichConsole()
    engine = engine if engine is not None else SemanticReleaseEngine()

    raw_env = CiEnvironment.from_environ(environ)
    ci = raw_env.corrected()
    console.debug(
        f"cwd={request.cwd} mainBranch={request.main_branch} release={request.release}"
    )
    console.debug(
        f"env GITHUB_HEAD_REF={raw_env.head_ref} GITHUB_REF={raw_env.ref} "
        f"GITHUB_REF_NAME={raw_env.ref_name}"
    )
    if ci is not raw_env:
        console.debug(f"pull request detected, treating {ci.ref_name} as the current branch")

    identity = inspect_repository(Repository(request.cwd, ci), ci, release=request.release)
    current_branch = identity.current_branch.unwrap_or("") or request.main_branch
    console.debug(f"currentBranch={current_branch}")

    repository_url = effective_repository_url(request, identity)
    use_temp_remote = needs_temp_remote(repository_url, release=request.release, ci=ci)

    with temp_remote_scope(
        request.cwd,
        current_branch,
        request.main_branch,
        console,
        env=ci,
        enabled=use_temp_remote,
    ) as remote:
        if remote is not None:
            repository_url = remote.url

        options = build_engine_options(request, repository_url)
        branches = resolve_branches(request, options, current_branch)
        console.debug(f"repositoryUrl={repository_url} branches={branches!r}")

        decision = engine.run(
            {**options, "branches": branches, "dryRun": True, "ci": False},
            cwd=request.cwd,
            env=ci.engine_env(),
        )

    if isinstance(decision, Err):
        return decision
    if decision.value is None:
        return Err(no_release())

    version = parse_version(decision.value.version)
    if version is None:
        return Err(invalid_version(decision.value.version))

    if request.release:
        return Ok(version.base())

    lookup = identity.short_commit_hash
    commit = lookup.unwrap_or("") if lookup is not None else ""
    token = commit or to_prerelease_id(current_branch or PREVIEW_MARKER)
    return Ok(version.with_preview(token))
