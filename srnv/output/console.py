"""Diagnostic output.

stdout carries exactly one thing, the resolved version, so everything else
(warnings, debug traces, errors) is written to stderr through a console.
Code takes a ``ConsoleProtocol``; the CLI passes a ``RichConsole`` and tests
pass a ``MockConsole``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "DEBUG_ENV_VAR",
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "debug_enabled",
]

DEBUG_ENV_VAR = "SRNV_DEBUG"

_FALSY = frozenset({"", "0", "false", "no", "off"})


def debug_enabled(environ: Mapping[str, str] | None = None) -> bool:
    value = (os.environ if environ is None else environ).get(DEBUG_ENV_VAR, "")
    return value.strip().lower() not in _FALSY


class Style(Enum):
    DEFAULT = auto()
    ERROR = auto()
    WARNING = auto()
    DEBUG = auto()


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def debug(self, message: str) -> None:
        """Trace one resolution step; silent unless debugging is on."""
        ...


class RichConsole:
    """stderr console backed by Rich.

    Messages are printed with markup disabled: branch names and URLs may
    contain square brackets. Soft wrapping keeps every message on one line
    whatever the terminal width.
    """

    _STYLES = {
        Style.DEFAULT: None,
        Style.ERROR: "red bold",
        Style.WARNING: "yellow",
        Style.DEBUG: "dim",
    }

    def __init__(self, *, debug: bool | None = None) -> None:
        from rich.console import Console

        self._console = Console(stderr=True, highlight=False, soft_wrap=True)
        self._debug = debug_enabled() if debug is None else debug

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._console.print(message, style=self._STYLES[style], markup=False)

    def _labelled(self, label: str, style: str, message: str) -> None:
        self._console.print(f"{label}:", style=style, markup=False, end=" ")
        self._console.print(message, markup=False)

    def error(self, message: str) -> None:
        self._labelled("error", "red bold", message)

    def warning(self, message: str) -> None:
        self._labelled("warning", "yellow", message)

    def debug(self, message: str) -> None:
        if self._debug:
            self._console.print(f"srnv {message}", style="dim", markup=False)


@dataclass
class Record:
    message: str
    style: Style


@dataclass
class MockConsole:
    """Captures output instead of printing it. Debug traces are always kept."""

    outputs: list[Record] = field(default_factory=list)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(Record(message, style))

    def error(self, message: str) -> None:
        self.print(f"error: {message}", Style.ERROR)

    def warning(self, message: str) -> None:
        self.print(f"warning: {message}", Style.WARNING)

    def debug(self, message: str) -> None:
        self.print(message, Style.DEBUG)

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    def has_warning(self) -> bool:
        return any(o.style is Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[Record]:
        return [o for o in self.outputs if substring in o.message]
