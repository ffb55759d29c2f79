"""
constraints.py - type-agnostic constraint checks
================================================

Every concrete type validator in :pymod:`lexicon_schema.validator` composes
these helpers.  Each check returns ``None`` on success and raises
:class:`~lexicon_schema.errors.ValidationError` on the first violation; a
constraint that is absent from the definition (``None``) is never enforced.

Public API
----------
validate_range(value, *, minimum=None, maximum=None, path)
validate_length(value, *, min_length=None, max_length=None, path, unit="elements")
validate_string_length(value, *, min_length=None, max_length=None, path)
validate_graphemes(value, *, min_graphemes=None, max_graphemes=None, path)
validate_const(value, const, path)
validate_enum(value, enum, path)
get_default(type_name, default)
"""

from __future__ import annotations

from typing import Any, Optional, Sized

from . import utils
from .errors import ValidationError

__all__ = [
    "UNITS",
    "validate_range",
    "validate_length",
    "validate_string_length",
    "validate_graphemes",
    "validate_const",
    "validate_enum",
    "get_default",
]

# --------------------------------------------------------------------------- #
# Message tables                                                              #
# --------------------------------------------------------------------------- #

# unit -> (too-short template, too-long template)
_LENGTH_MESSAGES: dict[str, tuple[str, str]] = {
    "elements":   ("must not have fewer than {n} elements", "must not have more than {n} elements"),
    "characters": ("must not be shorter than {n} characters", "must not be longer than {n} characters"),
    "bytes":      ("must not be smaller than {n} bytes", "must not be larger than {n} bytes"),
    "graphemes":  ("must not be shorter than {n} graphemes", "must not be longer than {n} graphemes"),
}

UNITS = tuple(_LENGTH_MESSAGES)


def _too_short(path: str, n: int, unit: str) -> ValidationError:
    return ValidationError(f"{path} " + _LENGTH_MESSAGES[unit][0].format(n=n))


def _too_long(path: str, n: int, unit: str) -> ValidationError:
    return ValidationError(f"{path} " + _LENGTH_MESSAGES[unit][1].format(n=n))


# --------------------------------------------------------------------------- #
# Numeric range                                                               #
# --------------------------------------------------------------------------- #

def validate_range(
    value: float,
    *,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    path: str,
) -> None:
    """Assert ``minimum <= value <= maximum`` (either bound may be omitted)."""
    if minimum is not None and value < minimum:
        raise ValidationError(f"{path} can not be less than {minimum}")
    if maximum is not None and value > maximum:
        raise ValidationError(f"{path} can not be greater than {maximum}")


# --------------------------------------------------------------------------- #
# Length                                                                      #
# --------------------------------------------------------------------------- #

def validate_length(
    value: Sized,
    *,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
    path: str,
    unit: str = "elements",
) -> None:
    """Assert the length of *value* lies within the given bounds.

    Parameters
    ----------
    value
        A sequence (length = element count), ``bytes`` (length = byte count)
        or ``str`` (length = UTF-8 byte count).
    unit
        One of ``elements``, ``characters``, ``bytes`` or ``graphemes``.  It
        only selects the wording of the error message.
    """
    if unit not in _LENGTH_MESSAGES:
        raise ValueError(f"unknown length unit {unit!r}; expected one of {UNITS}")

    length = utils._utf8_len(value) if isinstance(value, str) else len(value)

    if min_length is not None and length < min_length:
        raise _too_short(path, min_length, unit)
    if max_length is not None and length > max_length:
        raise _too_long(path, max_length, unit)


def validate_string_length(
    value: str,
    *,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
    path: str,
) -> None:
    """UTF-8 byte-length check that avoids encoding when the bound is obvious.

    A code point never takes more than ``utils._UTF8_MAX_WIDTH`` bytes, so the
    code-point count alone can settle a lone ``maxLength`` (always satisfied)
    or a lone ``minLength`` (never satisfied) for short strings.
    """
    if min_length is None and max_length is None:
        return

    upper_bound = len(value) * utils._UTF8_MAX_WIDTH

    if min_length is not None and max_length is None and upper_bound < min_length:
        raise _too_short(path, min_length, "characters")
    if max_length is not None and min_length is None and upper_bound <= max_length:
        return

    validate_length(value, min_length=min_length, max_length=max_length, path=path, unit="characters")


def validate_graphemes(
    value: str,
    *,
    min_graphemes: Optional[int] = None,
    max_graphemes: Optional[int] = None,
    path: str,
) -> None:
    """Assert the grapheme-cluster count of *value* lies within the bounds."""
    if min_graphemes is None and max_graphemes is None:
        return

    count = utils._grapheme_len(value)
    if max_graphemes is not None and count > max_graphemes:
        raise _too_long(path, max_graphemes, "graphemes")
    if min_graphemes is not None and count < min_graphemes:
        raise _too_short(path, min_graphemes, "graphemes")


# --------------------------------------------------------------------------- #
# Const / enum                                                                #
# --------------------------------------------------------------------------- #

def validate_const(value: Any, const: Any, path: str) -> None:
    """Assert *value* equals *const*; a ``None`` const accepts anything."""
    if const is None or utils._same_value(value, const):
        return
    raise ValidationError(f"{path} must be {utils._format_scalar(const)}")


def validate_enum(value: Any, enum: Any, path: str) -> None:
    """Assert *value* is one of *enum*; a non-list enum is not enforced."""
    if not isinstance(enum, (list, tuple)):
        return
    if any(utils._same_value(value, option) for option in enum):
        return
    options = "|".join(utils._format_scalar(option) for option in enum)
    raise ValidationError(f"{path} must be one of ({options})")


# --------------------------------------------------------------------------- #
# Defaults                                                                    #
# --------------------------------------------------------------------------- #

def get_default(type_name: Any, default: Any) -> Any:
    """Return *default* when its runtime type matches *type_name*, else ``None``.

    Only ``string``, ``integer`` and ``boolean`` definitions carry defaults;
    ``get_default("integer", "123")`` is ``None``.
    """
    if isinstance(type_name, str) and utils._matches_type(type_name, default):
        return default
    return None
