"""Typed configuration loading.

Settings come from a TOML file, looked up in this order:

1. an explicit path (``--config``),
2. ``<cwd>/.next-version.toml``,
3. the ``[tool.next-version]`` table of ``<cwd>/pyproject.toml``.

Example ``.next-version.toml``::

    main-branch = "trunk"
    tag-format = "v${version}"
    plugins = ["@semantic-release/commit-analyzer"]
    branches = ["trunk", { name = "next", prerelease = true }]

    [options]
    preset = "conventionalcommits"

Command-line flags override file values.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_list, get_str, get_table

if TYPE_CHECKING:
    from srnv.output.console import ConsoleProtocol

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_MAIN_BRANCH",
    "Config",
    "ConfigError",
    "find_config",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = ".next-version.toml"
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TABLE = "next-version"

DEFAULT_MAIN_BRANCH = "main"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """A config file that could not be read or understood."""

    message: str
    path: Path | None = None


def _empty_options() -> StrDict:
    return {}


@dataclass(frozen=True, slots=True)
class Config:
    """Resolution settings read from a config file.

    Attributes:
        main_branch: Branch whose releases get a plain version.
        repository_url: Repository URL override.
        tag_format: semantic-release tag format override.
        plugins: semantic-release plugin list override.
        branches: Branch configuration override (None keeps the defaults).
        options: Raw semantic-release options merged over the defaults.
    """

    main_branch: str = DEFAULT_MAIN_BRANCH
    repository_url: str | None = None
    tag_format: str | None = None
    plugins: list[object] | None = None
    branches: list[object] | None = None
    options: StrDict = field(default_factory=_empty_options)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Build a Config from a parsed TOML table.

        Raises:
            TypeError: A key has the wrong type.
        """
        options = data.get("options", {})
        if as_str_dict(options) is None:
            raise TypeError("'options' must be a table")

        branches_value = data.get("branches")
        branches: list[object] | None
        if branches_value is None:
            branches = None
        elif isinstance(branches_value, str):
            branches = [branches_value]
        elif as_str_dict(branches_value) is not None:
            branches = [branches_value]
        else:
            branches = get_list(data, "branches")
            if branches is None:
                raise TypeError("'branches' must be a string, table, or array")

        plugins = get_list(data, "plugins")
        if "plugins" in data and plugins is None:
            raise TypeError("'plugins' must be an array")

        return cls(
            main_branch=get_str(data, "main-branch") or DEFAULT_MAIN_BRANCH,
            repository_url=get_str(data, "repository-url"),
            tag_format=get_str(data, "tag-format"),
            plugins=plugins,
            branches=branches,
            options=dict(get_table(data, "options") or {}),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ConfigError(f"config file not found: {path}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"cannot read {path}: {e}", path=path))

    try:
        parsed: object = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML in {path.name}: {e}", path=path))

    table = as_str_dict(parsed)
    if table is None:
        return Err(ConfigError(f"{path.name} must contain a TOML table", path=path))
    return Ok(table)


def find_config(cwd: Path) -> Path | None:
    """Locate the config file for a working directory, if any."""
    dedicated = cwd / CONFIG_FILENAME
    if dedicated.is_file():
        return dedicated
    pyproject = cwd / PYPROJECT_FILENAME
    if pyproject.is_file():
        return pyproject
    return None


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load configuration from a TOML file.

    ``pyproject.toml`` files are read from their ``[tool.next-version]``
    table; a pyproject without that table yields the default Config.

    Args:
        path: Path to the TOML file.

    Returns:
        The parsed Config, or a ConfigError naming the file.
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return _config_from(path, result.value)


def _config_from(path: Path, data: StrDict) -> Result[Config, ConfigError]:
    if path.name == PYPROJECT_FILENAME:
        tool = get_table(data, "tool") or {}
        data = get_table(tool, PYPROJECT_TABLE) or {}

    try:
        return Ok(Config.from_dict(data))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"invalid config in {path.name}: {e}", path=path))


def load_config_or_default(
    cwd: Path, console: ConsoleProtocol | None = None
) -> Result[Config, ConfigError]:
    """Load the config discovered under ``cwd``, or defaults when none exists.

    A ``pyproject.toml`` that cannot be read or parsed only produces a
    warning and the defaults. A broken ``[tool.next-version]`` table is
    still an error.
    """
    path = find_config(cwd)
    if path is None:
        return Ok(Config())
    parsed = _parse_toml(path)
    if isinstance(parsed, Err):
        if path.name != PYPROJECT_FILENAME:
            return parsed
        if console is not None:
            console.warning(f"{parsed.error.message}; using default settings")
        return Ok(Config())
    return _config_from(path, parsed.value)
