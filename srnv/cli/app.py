from __future__ import annotations

from pathlib import Path

import typer

from srnv import __version__
from srnv.core.config import Config, ConfigError, load_config, load_config_or_default
from srnv.core.errors import ErrorCode
from srnv.core.result import Err, Result
from srnv.output.console import ConsoleProtocol, RichConsole
from srnv.release.model import ResolutionRequest
from srnv.release.resolver import resolve_next_version


app = typer.Typer(
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
    help="Print the next semantic-release version without pushing tags or publishing.",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def _load_settings(
    cwd: Path, config_path: Path | None, console: ConsoleProtocol
) -> Result[Config, ConfigError]:
    if config_path is not None:
        return load_config(config_path)
    return load_config_or_default(cwd, console)


def _fail(console: ConsoleProtocol, message: str) -> typer.Exit:
    console.error(message)
    return typer.Exit(code=int(ErrorCode.USER_ERROR))


@app.command()
def next_version(
    release: bool = typer.Option(
        False, "--release", help="Return the plain next release version (x.y.z)."
    ),
    cwd: Path | None = typer.Option(
        None, "--cwd", help="Working directory (defaults to current)."
    ),
    main_branch: str | None = typer.Option(
        None, "--main-branch", help="Name of the main release branch (default: main)."
    ),
    config_path: Path | None = typer.Option(
        None, "--config", help="Config file (default: .next-version.toml or pyproject.toml)."
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Trace resolution steps on stderr (also SRNV_DEBUG=1)."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show package version.",
    ),
) -> None:
    console = RichConsole(debug=True if debug else None)

    workdir = (cwd or Path.cwd()).expanduser()
    if not workdir.is_dir():
        raise _fail(console, f"working directory not found: {workdir}")

    settings = _load_settings(workdir, config_path, console)
    if isinstance(settings, Err):
        raise _fail(console, settings.error.message)
    config = settings.value

    request = ResolutionRequest(
        cwd=workdir,
        release=release,
        main_branch=main_branch or config.main_branch,
        repository_url=config.repository_url,
        branches=config.branches,  # type: ignore[arg-type]
        tag_format=config.tag_format,
        plugins=config.plugins,
        config=config.options,
    )

    result = resolve_next_version(request, console=console)
    if isinstance(result, Err):
        raise _fail(console, result.error.pretty())

    typer.echo(result.value)


def main() -> None:
    app()
