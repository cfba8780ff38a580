"""Shared fakes for git and the release engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from srnv.core.result import Err, Ok, Result
from srnv.platform.process import ProcessError
from srnv.release.errors import ReleaseError
from srnv.release.model import ReleaseDecision

_CI_VARS = (
    "GITHUB_HEAD_REF",
    "GITHUB_REF",
    "GITHUB_REF_NAME",
    "GITHUB_SHA",
    "GITHUB_TOKEN",
    "GH_TOKEN",
    "GIT_TOKEN",
    "SRNV_DEBUG",
)


def _calls() -> list[list[str]]:
    return []


@dataclass
class FakeGit:
    """Stand-in for ``run`` as seen by srnv.git.repository.

    A lookup answer of None makes that git command fail.
    """

    branch: str | None = "main"
    origin: str | None = ""
    commit: str | None = "abcdef0"
    fail_all: bool = False
    nonzero_exit: bool = False
    fail_init: bool = False
    fail_push: bool = False
    calls: list[list[str]] = field(default_factory=_calls)

    def __call__(
        self,
        cmd: list[str],
        cwd: Path,
        env: Mapping[str, str] | None = None,
        *,
        timeout: float | None = None,
        input: str | None = None,
        stream_stderr: bool = False,
    ) -> Result[str, ProcessError]:
        self.calls.append(list(cmd))
        args = cmd[1:]
        if self.fail_all:
            return Err(ProcessError(tuple(cmd), -1, "", "fatal: not a git repository"))
        if self.nonzero_exit:
            return Err(ProcessError(tuple(cmd), 1, "", "fatal"))

        if args[:2] == ["init", "--bare"]:
            if self.fail_init:
                return Err(ProcessError(tuple(cmd), 1, "", "init failed"))
            Path(args[2]).mkdir(parents=True, exist_ok=True)
            return Ok("")
        if args and args[0] == "push" and self.fail_push:
            return Err(ProcessError(tuple(cmd), 1, "", "push rejected"))
        if "--abbrev-ref" in args:
            return self._answer(cmd, self.branch)
        if "--short" in args:
            return self._answer(cmd, self.commit)
        if args == ["config", "--get", "remote.origin.url"]:
            return self._answer(cmd, self.origin)
        return Ok("")

    def _answer(self, cmd: list[str], value: str | None) -> Result[str, ProcessError]:
        if value is None:
            return Err(ProcessError(tuple(cmd), 128, "", "git unavailable"))
        return Ok(f"{value}\n")

    @property
    def pushes(self) -> list[list[str]]:
        return [c for c in self.calls if c[1:2] == ["push"]]

    def ran(self, *args: str) -> bool:
        return any(c[1 : 1 + len(args)] == list(args) for c in self.calls)


@dataclass
class EngineCall:
    options: dict[str, object]
    cwd: Path
    env: dict[str, str]


def _engine_calls() -> list[EngineCall]:
    return []


@dataclass
class FakeEngine:
    """Release engine returning a canned answer and recording its calls."""

    version: str | None = "1.0.0"
    error: ReleaseError | None = None
    raises: Exception | None = None
    calls: list[EngineCall] = field(default_factory=_engine_calls)
    temp_paths_seen: list[bool] = field(default_factory=list)

    def run(
        self,
        options: Mapping[str, object],
        *,
        cwd: Path,
        env: Mapping[str, str],
    ) -> Result[ReleaseDecision | None, ReleaseError]:
        self.calls.append(EngineCall(dict(options), cwd, dict(env)))
        url = options.get("repositoryUrl")
        self.temp_paths_seen.append(isinstance(url, str) and Path(url).is_dir())
        if self.raises is not None:
            raise self.raises
        if self.error is not None:
            return Err(self.error)
        if self.version is None:
            return Ok(None)
        return Ok(ReleaseDecision(version=self.version))

    @property
    def options(self) -> dict[str, object]:
        assert self.calls, "engine was not called"
        return self.calls[-1].options


@pytest.fixture(autouse=True)
def _clean_ci_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests run as if outside CI unless they set variables themselves."""
    for name in _CI_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_git(monkeypatch: pytest.MonkeyPatch) -> FakeGit:
    import srnv.git.repository as repository

    git = FakeGit()
    monkeypatch.setattr(repository, "run_process", git)
    return git


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()
