"""Narrowing helpers for parsed TOML and JSON.

``tomllib`` and ``json`` hand back ``object``; these check shapes at runtime
so config and engine-answer parsing can stay typed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

StrDict = dict[str, object]


def as_str_dict(obj: object) -> StrDict | None:
    """``obj`` if it is a dict keyed by strings, else None."""
    if isinstance(obj, dict) and all(isinstance(k, str) for k in cast(dict[object, object], obj)):
        return cast(StrDict, obj)
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Stripped string at ``key``; None when absent, blank, or not a string."""
    value = table.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_list(table: Mapping[str, object], key: str) -> list[object] | None:
    value = table.get(key)
    return cast(list[object], value) if isinstance(value, list) else None
