"""
utils.py - shared, low-level utilities for the lexicon-schema package.

This module consolidates common helpers for:
- Runtime type predicates (lexicon type -> Python value)
- Length measurement (UTF-8 bytes, grapheme clusters)
- Display helpers (rendering scalars inside error messages)
"""

from __future__ import annotations

from typing import Any

import regex

# --------------------------------------------------------------------------- #
# Type Checking Helpers                                                       #
# --------------------------------------------------------------------------- #

def _is_integer(value: Any) -> bool:
    """Return True iff *value* is an int (``bool`` excluded)."""
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_bytes(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray))


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


# Python predicate for every lexicon type that may carry a ``default``.
_TYPE_MAP = {
    "string": lambda v: isinstance(v, str),
    "integer": _is_integer,
    "boolean": lambda v: isinstance(v, bool),
}


def _matches_type(type_name: str, value: Any) -> bool:
    """Return True iff *value* has the runtime type lexicon *type_name* expects."""
    check = _TYPE_MAP.get(type_name)
    return check is not None and check(value)


def _same_value(a: Any, b: Any) -> bool:
    """Structural equality that keeps ``True`` and ``1`` apart."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    return a == b


# --------------------------------------------------------------------------- #
# Length Measurement                                                          #
# --------------------------------------------------------------------------- #

# Widest UTF-8 encoding of a single code point.
_UTF8_MAX_WIDTH = 4

_GRAPHEME_RE = regex.compile(r"\X")


def _utf8_len(value: str) -> int:
    """Number of bytes *value* occupies once UTF-8 encoded."""
    return len(value.encode("utf-8", "surrogatepass"))


def _grapheme_len(value: str) -> int:
    """Number of user-perceived characters (extended grapheme clusters)."""
    return sum(1 for _ in _GRAPHEME_RE.finditer(value))


# --------------------------------------------------------------------------- #
# Display Helper                                                              #
# --------------------------------------------------------------------------- #

def _format_scalar(v: Any) -> str:
    """Render *v* the way lexicon JSON spells it (``true``, ``null``, ...)."""
    if v is True:   return "true"
    if v is False:  return "false"
    if v is None:   return "null"
    return str(v)
