"""Release-decision engine adapter.

The version itself is decided by semantic-release, a Node.js tool. We run
it through ``node`` with a small ES-module bridge: options arrive as JSON on
stdin, semantic-release's own logging is routed to stderr, and the bridge
prints a single JSON line with the ``nextRelease`` payload (or ``null``).
Keeping stdout down to that line lets the CLI reserve stdout for the
version string.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from srnv.core.result import Err, Ok, Result
from srnv.core.structured import as_str_dict
from srnv.platform.process import run
from srnv.release.errors import ReleaseError, invalid_version
from srnv.release.model import ReleaseDecision

__all__ = [
    "BRIDGE_SCRIPT",
    "ReleaseEngine",
    "SemanticReleaseEngine",
    "parse_decision",
]

BRIDGE_SCRIPT = """\
import semanticRelease from 'semantic-release'

let input = ''
for await (const chunk of process.stdin) input += chunk
const { options, cwd } = JSON.parse(input)

const result = await semanticRelease(options, {
  cwd,
  env: process.env,
  stdout: process.stderr,
  stderr: process.stderr,
})

process.stdout.write(
  JSON.stringify(result ? { nextRelease: result.nextRelease ?? null } : null) + '\\n'
)
"""

_ENGINE_TIMEOUT_SECONDS = 10 * 60.0


class ReleaseEngine(Protocol):
    """Something that decides the next release for a repository."""

    def run(
        self,
        options: Mapping[str, object],
        *,
        cwd: Path,
        env: Mapping[str, str],
    ) -> Result[ReleaseDecision | None, ReleaseError]:
        """Evaluate ``options`` against the repository at ``cwd``.

        Returns:
            Ok(decision), Ok(None) when there is nothing to release, or
            Err(ReleaseError) when the engine could not run.
        """
        ...


class SemanticReleaseEngine:
    """Runs semantic-release through Node.js.

    semantic-release must be resolvable from ``cwd`` (a project dependency
    or a global install on NODE_PATH).
    """

    def __init__(self, node: str = "node", *, timeout: float | None = _ENGINE_TIMEOUT_SECONDS) -> None:
        self.node = node
        self.timeout = timeout

    def command(self) -> list[str]:
        return [self.node, "--input-type=module", "-e", BRIDGE_SCRIPT]

    def run(
        self,
        options: Mapping[str, object],
        *,
        cwd: Path,
        env: Mapping[str, str],
    ) -> Result[ReleaseDecision | None, ReleaseError]:
        try:
            payload = json.dumps({"options": dict(options), "cwd": str(cwd)})
        except (TypeError, ValueError) as e:
            return Err(ReleaseError(kind="engine", message=f"options are not JSON serializable: {e}"))
        result = run(
            self.command(),
            cwd=cwd,
            env=env,
            timeout=self.timeout,
            input=payload,
            stream_stderr=True,
        )
        if isinstance(result, Err):
            e = result.error
            detail = e.stderr.strip() or f"exit {e.returncode}"
            return Err(
                ReleaseError(
                    kind="engine",
                    message=f"semantic-release failed: {detail}",
                    hint="is semantic-release installed in the project?",
                )
            )

        lines = [ln for ln in result.value.splitlines() if ln.strip()]
        if not lines:
            return Err(ReleaseError(kind="engine", message="semantic-release produced no output"))
        try:
            answer: object = json.loads(lines[-1])
        except json.JSONDecodeError as e:
            return Err(
                ReleaseError(kind="engine", message=f"unreadable semantic-release output: {e}")
            )
        return parse_decision(answer)


def parse_decision(answer: object) -> Result[ReleaseDecision | None, ReleaseError]:
    """Validate the engine's answer.

    A falsy answer, or one without ``nextRelease``, means no release. A
    ``nextRelease`` whose version is not a string cannot be a version.
    """
    if not answer:
        return Ok(None)
    data = as_str_dict(answer)
    if data is None:
        return Err(invalid_version(answer))

    next_release = data.get("nextRelease")
    if not next_release:
        return Ok(None)
    release = as_str_dict(next_release)
    if release is None:
        return Err(invalid_version(next_release))

    version = release.get("version")
    if not isinstance(version, str):
        return Err(invalid_version(version))

    return Ok(
        ReleaseDecision(
            version=version,
            git_tag=_opt_str(release.get("gitTag")),
            channel=_opt_str(release.get("channel")),
            type=_opt_str(release.get("type")),
        )
    )


def _opt_str(value: object) -> str | None:
    return value if isinstance(value, str) else None
