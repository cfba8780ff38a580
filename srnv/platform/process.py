"""The one place that spawns child processes.

git lookups and the semantic-release bridge both go through ``run``. It
never raises for process-level failures: a non-zero exit, a missing binary
and a timeout all come back as ``Err(ProcessError)``.
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from srnv.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that did not exit cleanly.

    ``returncode`` is -1 when the process never ran or was killed on
    timeout; ``stderr`` then holds our own description.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


def run(
    cmd: list[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
    input: str | None = None,
    stream_stderr: bool = False,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` and return its stdout.

    Args:
        env: Full child environment; None inherits ours.
        input: Text fed to the child's stdin.
        stream_stderr: Leave the child's stderr attached to ours instead of
            capturing it, so its logs show up live. ``ProcessError.stderr``
            is then empty.
    """
    command = tuple(cmd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=None if env is None else dict(env),
            input=input,
            stdout=subprocess.PIPE,
            stderr=None if stream_stderr else subprocess.PIPE,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return Err(ProcessError(command, -1, partial, f"timed out after {timeout}s"))
    except OSError as e:
        return Err(ProcessError(command, -1, "", str(e)))

    stdout = proc.stdout or ""
    if proc.returncode != 0:
        return Err(ProcessError(command, proc.returncode, stdout, proc.stderr or ""))
    return Ok(stdout)
