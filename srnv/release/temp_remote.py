"""Disposable local remote for the release engine.

semantic-release analyses commits between the last tag and HEAD by talking
to a remote. ``.`` is not enough for that analysis, and the real origin may
be unreachable from CI or need credentials we do not have. Instead we create
a bare repository in a private temp directory, push the main branch, the
current branch and every tag into it, and point the engine at its path.

Usage:
    with temp_remote_scope(cwd, current, main, console) as remote:
        url = remote.url if remote is not None else url
        engine.run(...)
    # the temp directory is gone here, whatever happened inside
"""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from srnv.core.environment import CiEnvironment
from srnv.core.result import Err, Ok, Result
from srnv.git.repository import GitError, Repository
from srnv.output.console import ConsoleProtocol
from srnv.release.errors import ReleaseError
from srnv.release.model import TempRemote

__all__ = [
    "REMOTE_DIRNAME",
    "TEMP_PREFIX",
    "cleanup_temp_remote",
    "provision_temp_remote",
    "temp_remote_scope",
]

TEMP_PREFIX = "srnv-"
REMOTE_DIRNAME = "remote.git"


def provision_temp_remote(
    cwd: Path,
    current_branch: str,
    main_branch: str,
    console: ConsoleProtocol,
    *,
    env: CiEnvironment | None = None,
) -> Result[TempRemote, ReleaseError]:
    """Create a bare repository holding the local history.

    Only creating the directory and the bare repository can fail the
    provisioning. Ref and tag pushes are best effort: a failed push leaves
    the engine with less history, which it reports on its own.
    """
    try:
        temp_root = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
    except OSError as e:
        return Err(
            ReleaseError(kind="provision", message=f"cannot create temp directory: {e}")
        )

    remote_path = temp_root / REMOTE_DIRNAME
    repo = Repository(cwd, env)

    init = repo.init_bare(remote_path)
    if isinstance(init, Err):
        _remove_tree(temp_root, console)
        return Err(
            ReleaseError(
                kind="provision",
                message=f"cannot create temp remote: {init.error.message}",
            )
        )

    remote = TempRemote(remote_path=remote_path, temp_root=temp_root)
    _best_effort(repo.set_symbolic_head(remote_path, main_branch), console)
    _best_effort(repo.push(remote.url, f"HEAD:refs/heads/{main_branch}"), console)
    if current_branch and current_branch != main_branch:
        _best_effort(repo.push(remote.url, f"HEAD:refs/heads/{current_branch}"), console)
    _best_effort(repo.push_tags(remote.url), console)

    console.debug(f"temp remote ready at {remote_path}")
    return Ok(remote)


def cleanup_temp_remote(remote: TempRemote, console: ConsoleProtocol) -> None:
    """Delete the temp remote; failures are reported, never raised."""
    _remove_tree(remote.temp_root, console)


@contextmanager
def temp_remote_scope(
    cwd: Path,
    current_branch: str,
    main_branch: str,
    console: ConsoleProtocol,
    *,
    env: CiEnvironment | None = None,
    enabled: bool = True,
) -> Iterator[TempRemote | None]:
    """Provision a temp remote for the duration of a ``with`` block.

    Yields None when ``enabled`` is false or provisioning failed; the
    failure is reported as a warning and the caller keeps its current URL.
    """
    remote: TempRemote | None = None
    if enabled:
        result = provision_temp_remote(cwd, current_branch, main_branch, console, env=env)
        match result:
            case Ok(value):
                remote = value
            case Err(error):
                console.warning(f"{error.message}; using the configured repository URL")
    try:
        yield remote
    finally:
        if remote is not None:
            cleanup_temp_remote(remote, console)


def _best_effort(result: Result[str, GitError], console: ConsoleProtocol) -> None:
    if isinstance(result, Err):
        console.debug(f"git {result.error.command} failed: {result.error.message}")


def _remove_tree(path: Path, console: ConsoleProtocol) -> None:
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        return
    except OSError as e:
        console.warning(f"could not remove temp remote {path}: {e}")
