"""Value coercion helpers shared by the techdoc configuration loader."""

from __future__ import annotations

import typing as typ

from .models import ConfigError


def _section(raw: typ.Mapping[str, typ.Any], name: str) -> typ.Mapping[str, typ.Any]:
    """Return the mapping stored under ``name`` or an empty mapping."""
    value = raw.get(name)
    match value:
        case None:
            return {}
        case dict():
            return value
        case _:
            msg = f"Section '{name}' must be a mapping."
            raise ConfigError(msg)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _positive_int(value: object, *, key: str) -> int:
    """Return ``value`` as an int greater than zero, rejecting booleans."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        msg = f"'{key}' must be a positive integer, got {value!r}."
        raise ConfigError(msg)
    return value


def _non_negative_int(value: object, *, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        msg = f"'{key}' must be a non-negative integer, got {value!r}."
        raise ConfigError(msg)
    return value


def _positive_float(value: object, *, key: str) -> float:
    """Return ``value`` as a float greater than zero."""
    if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
        msg = f"'{key}' must be a positive number, got {value!r}."
        raise ConfigError(msg)
    return float(value)


__all__ = [
    "_non_negative_int",
    "_optional_str",
    "_positive_float",
    "_positive_int",
    "_section",
]
