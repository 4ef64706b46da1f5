"""
Internal helper functions for the ThingsTodo store.

This module is private API. Do not import directly.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from thingstodo.errors import InputInvalidError

EMPTY_NAME_REASON = "Todo is empty"


def _require_name(name: object) -> str:
    """
    Validate an item name.

    Names must survive every codec: no NUL characters (BSON keys are
    C strings) and valid UTF-8 (no lone surrogates).

    Raises:
        InputInvalidError: If name is not a str, is empty, contains a NUL
            or cannot be encoded as UTF-8.
    """
    if not isinstance(name, str):
        raise InputInvalidError(f"todo name must be str, not {type(name).__name__}")
    if not name:
        raise InputInvalidError(EMPTY_NAME_REASON)
    if "\x00" in name:
        raise InputInvalidError("Todo contains a NUL character")
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        raise InputInvalidError("Todo is not valid UTF-8 text") from None
    return name


def _coerce_status(value: object) -> bool:
    """
    Validate an item status.

    Only real bools are accepted; 0/1 and truthy strings are rejected so a
    caller bug cannot silently flip an item.

    Raises:
        InputInvalidError: If value is not a bool.
    """
    if not isinstance(value, bool):
        raise InputInvalidError(f"status must be bool, not {type(value).__name__}")
    return value


def _validated_items(source: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> dict[str, bool]:
    """Build a validated name -> status dict from a mapping or pair iterable."""
    pairs = source.items() if isinstance(source, Mapping) else source
    out: dict[str, bool] = {}
    for name, status in pairs:
        out[_require_name(name)] = _coerce_status(status)
    return out
