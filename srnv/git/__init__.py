"""Git introspection.

Usage:
    from srnv.git import Repository

    repo = Repository(Path("."))
    branch = repo.current_branch().unwrap_or("")
"""

from srnv.git.repository import GitError, Repository

__all__ = ["GitError", "Repository"]
