"""Git repository introspection.

``Repository`` answers the three questions a version resolution asks about
the local checkout (current branch, origin URL, short commit hash) and
exposes the handful of plumbing commands the temporary remote needs. Every
method returns a Result; nothing here raises on git failure.

CI hints take precedence over git where GitHub Actions provides them:

    GITHUB_HEAD_REF  -> current branch (pull_request events)
    GITHUB_REF_NAME  -> current branch (push events)
    GITHUB_SHA       -> commit hash (truncated to 7 characters)

Usage:
    repo = Repository(Path("."))
    match repo.current_branch(ci):
        case Ok(branch):
            print(f"Branch: {branch}")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from srnv.core.environment import CiEnvironment
from srnv.core.result import Err, Ok, Result
from srnv.platform.process import ProcessError
from srnv.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_PUSH_TIMEOUT_SECONDS = 3 * 60.0

SHORT_SHA_LENGTH = 7

__all__ = [
    "GitError",
    "Repository",
    "SHORT_SHA_LENGTH",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code (-1 if git could not be started)
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """A local git checkout.

    Attributes:
        path: Working directory git commands run in.
        env: Environment for git commands (None inherits ours).
    """

    def __init__(self, path: Path, env: CiEnvironment | None = None) -> None:
        self.path = path
        self.env = env

    # -- introspection -----------------------------------------------------

    def current_branch(self, ci: CiEnvironment | None = None) -> Result[str, GitError]:
        """Name of the branch being built.

        Prefers GITHUB_HEAD_REF, then GITHUB_REF_NAME, then
        ``git rev-parse --abbrev-ref HEAD``.
        """
        if ci is not None:
            if ci.head_ref:
                return Ok(ci.head_ref)
            if ci.ref_name:
                return Ok(ci.ref_name)
        return self._query(["rev-parse", "--abbrev-ref", "HEAD"])

    def remote_origin_url(self) -> Result[str, GitError]:
        """Value of ``remote.origin.url``."""
        return self._query(["config", "--get", "remote.origin.url"])

    def short_commit_hash(self, ci: CiEnvironment | None = None) -> Result[str, GitError]:
        """Abbreviated HEAD commit, preferring GITHUB_SHA."""
        if ci is not None and ci.sha:
            return Ok(ci.sha[:SHORT_SHA_LENGTH])
        return self._query(["rev-parse", "--short", "HEAD"])

    # -- plumbing ----------------------------------------------------------

    def init_bare(self, target: Path) -> Result[str, GitError]:
        """Create a bare repository at ``target``."""
        return self._query(["init", "--bare", str(target)])

    def set_symbolic_head(self, git_dir: Path, branch: str) -> Result[str, GitError]:
        """Point ``git_dir``'s HEAD at ``refs/heads/<branch>``."""
        return self._query(
            ["--git-dir", str(git_dir), "symbolic-ref", "HEAD", f"refs/heads/{branch}"]
        )

    def push(self, remote: str, refspec: str) -> Result[str, GitError]:
        """Push one refspec to ``remote`` (a URL or path)."""
        return self._query(["push", remote, refspec])

    def push_tags(self, remote: str) -> Result[str, GitError]:
        """Push every local tag to ``remote``."""
        return self._query(["push", remote, "--tags"])

    # -- internals ---------------------------------------------------------

    def _query(self, args: list[str]) -> Result[str, GitError]:
        """Run git and return its stripped stdout."""
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_to_git_error(args, e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        timeout = _GIT_PUSH_TIMEOUT_SECONDS if "push" in args else _GIT_TIMEOUT_SECONDS
        env = self.env.as_dict() if self.env is not None else None
        return run_process(["git", *args], cwd=self.path, env=env, timeout=timeout)


def _to_git_error(args: list[str], error: ProcessError) -> GitError:
    command = " ".join(args)
    return GitError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or f"git {command} failed",
        returncode=error.returncode,
    )
