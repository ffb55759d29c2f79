"""
validator.py - the recursive, type-directed lexicon validation engine
=====================================================================

:func:`validate_one` walks a lexicon definition and a value in lock-step and
dispatches on the definition's ``type`` tag.  Every per-type validator
returns the (possibly defaulted) value or raises
:class:`~lexicon_schema.errors.ValidationError`; the first violation wins.

Public API
----------
validate_one(lexicon, path, definition, value)
    Validate *value* against *definition*; nested definitions are reached
    only through this function.

validate_object(lexicon, path, definition, value)
    Object semantics (``properties`` / ``required`` / ``nullable`` and
    defaults), shared with ``record`` definitions.

Containers are copied only when something inside them changed (a default was
filled in or a token was blanked), so an untouched value comes back as the
very same object.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from . import constraints
from . import formats
from . import resolver
from . import utils
from . import xrpc
from .errors import ValidationError
from .lexicon import Lexicon

__all__ = [
    "TYPE_KEY",
    "validate_one",
    "validate_object",
    "get_default_value",
]

TYPE_KEY = "$type"

_CID_LINK_RE = re.compile(r"Qm[1-9A-HJ-NP-Za-km-z]{44}|b[a-z2-7]{58,}")


def _bound(definition: Mapping, key: str) -> Any:
    """Numeric constraint *key* of *definition*; anything non-numeric counts as unset."""
    bound = definition.get(key)
    return bound if utils._is_number(bound) else None


# --------------------------------------------------------------------------- #
# Dispatcher                                                                  #
# --------------------------------------------------------------------------- #

def validate_one(lexicon: Lexicon, path: str, definition: Any, value: Any) -> Any:
    """Validate *value* against *definition* and return the validated value."""

    if not isinstance(definition, Mapping):
        raise ValidationError(f"Invalid definition at {path}")

    dtype = definition.get("type")

    # 1) indirection --------------------------------------------------------
    if dtype == "union":
        return _validate_union(lexicon, path, definition, value)
    if dtype == "ref":
        target = resolver.resolve_ref(lexicon, definition.get("ref"))
        return validate_one(lexicon, path, target, value)

    # 2) containers ---------------------------------------------------------
    if dtype == "object":
        return validate_object(lexicon, path, definition, value)
    if dtype == "array":
        return _validate_array(lexicon, path, definition, value)
    if dtype == "record":
        return _validate_record(lexicon, path, definition, value)

    # 3) scalars ------------------------------------------------------------
    if dtype == "string":
        return _validate_string(path, definition, value)
    if dtype == "integer":
        return _validate_integer(path, definition, value)
    if dtype == "boolean":
        return _validate_boolean(path, definition, value)
    if dtype == "bytes":
        return _validate_bytes(path, definition, value)
    if dtype == "cid-link":
        return _validate_cid_link(path, value)

    # 4) opaque payloads ----------------------------------------------------
    if dtype == "unknown":
        return _validate_unknown(path, value)
    if dtype == "blob":
        return _validate_blob(path, value)
    if dtype == "token":
        return None

    # 5) XRPC endpoints -----------------------------------------------------
    if dtype in xrpc.ENDPOINT_TYPES:
        return xrpc.validate_endpoint(lexicon, path, definition, value)

    raise ValidationError(f"Unsupported type '{dtype}' at {path}")


# --------------------------------------------------------------------------- #
# Union                                                                       #
# --------------------------------------------------------------------------- #

def _validate_union(lexicon: Lexicon, path: str, definition: Mapping, value: Any) -> Any:
    if not isinstance(value, Mapping) or not isinstance(value.get(TYPE_KEY), str):
        raise ValidationError(f'{path} must be an object which includes the "{TYPE_KEY}" property')

    refs = definition.get("refs")
    refs = list(refs) if isinstance(refs, (list, tuple)) else []
    type_value = value[TYPE_KEY]

    if resolver.refs_contain_type(refs, type_value):
        concrete = resolver.resolve_ref(lexicon, type_value)
        return validate_one(lexicon, path, concrete, value)

    if definition.get("closed"):
        raise ValidationError(f"{path} {TYPE_KEY} must be one of {', '.join(map(str, refs))}")
    return value


# --------------------------------------------------------------------------- #
# Object / record                                                             #
# --------------------------------------------------------------------------- #

def get_default_value(definition: Any) -> Any:
    """Default declared by *definition*, or ``None`` if absent or mistyped."""
    if not isinstance(definition, Mapping) or "default" not in definition:
        return None
    return constraints.get_default(definition.get("type"), definition["default"])


def validate_object(
    lexicon: Lexicon,
    path: str,
    definition: Mapping,
    value: Any,
    *,
    noun: str = "property",
) -> Any:
    """Validate each declared property of *value*; undeclared keys pass through.

    *noun* names a member in the missing-required message (XRPC parameters
    report ``must have the parameter "q"``).
    """
    if not isinstance(value, Mapping):
        raise ValidationError(f"Expected object at {path}, got {value!r}")

    properties = definition.get("properties") or {}
    if not isinstance(properties, Mapping):
        raise ValidationError(f"Invalid object definition at {path}")
    required = _names(definition.get("required"))
    nullable = _names(definition.get("nullable"))

    result = value
    for key, prop_def in properties.items():
        key_value = value.get(key)
        is_required = key in required

        if key_value is None and key in nullable:
            continue

        if key_value is None and not is_required:
            default = get_default_value(prop_def)
            if default is not None:
                result = _with_key(result, value, key, default)
            continue

        try:
            validated = validate_one(lexicon, f"{path}/{key}", prop_def, key_value)
        except ValidationError as exc:
            if key_value is None:
                raise ValidationError(f'{path} must have the {noun} "{key}"') from exc
            raise

        if validated is not key_value and not utils._same_value(validated, key_value):
            result = _with_key(result, value, key, validated)

    return result


def _names(value: Any) -> tuple:
    # ``required`` / ``nullable``: anything but a list of names declares nothing
    return tuple(value) if isinstance(value, (list, tuple)) else ()


def _with_key(result: Mapping, original: Mapping, key: str, new_value: Any) -> dict:
    """Copy-on-write: clone *original* the first time a key changes."""
    if result is original:
        result = dict(original)
    result[key] = new_value
    return result


def _validate_record(lexicon: Lexicon, path: str, definition: Mapping, value: Any) -> Any:
    record_def = definition.get("record")
    if not isinstance(record_def, Mapping):
        raise ValidationError(f"Invalid record definition at {path}")
    return validate_object(lexicon, path, record_def, value)


# --------------------------------------------------------------------------- #
# Array                                                                       #
# --------------------------------------------------------------------------- #

def _validate_array(lexicon: Lexicon, path: str, definition: Mapping, value: Any) -> Any:
    if not utils._is_array(value):
        raise ValidationError(f"{path} must be an array, got {value!r}")

    constraints.validate_length(
        value,
        min_length=_bound(definition, "minLength"),
        max_length=_bound(definition, "maxLength"),
        path=path,
        unit="elements",
    )

    items_def = definition.get("items")
    if items_def is None:
        return value

    result = value
    for idx, item in enumerate(value):
        validated = validate_one(lexicon, f"{path}/{idx}", items_def, item)
        if validated is not item and not utils._same_value(validated, item):
            if result is value:
                result = list(value)
            result[idx] = validated
    return result


# --------------------------------------------------------------------------- #
# Scalars                                                                     #
# --------------------------------------------------------------------------- #

def _default_or_fail(type_name: str, path: str, definition: Mapping, article: str) -> Any:
    """``None`` input: fall back to the declared default, if it is well typed."""
    default = constraints.get_default(type_name, definition.get("default"))
    if default is None:
        raise ValidationError(f"{path} must be {article} {type_name}")
    return default


def _validate_string(path: str, definition: Mapping, value: Any) -> Any:
    if value is None:
        return _default_or_fail("string", path, definition, "a")
    if not isinstance(value, str):
        raise ValidationError(f"{path} must be a string, got {value!r}")

    constraints.validate_const(value, definition.get("const"), path)
    constraints.validate_enum(value, definition.get("enum"), path)
    constraints.validate_string_length(
        value,
        min_length=_bound(definition, "minLength"),
        max_length=_bound(definition, "maxLength"),
        path=path,
    )
    constraints.validate_graphemes(
        value,
        min_graphemes=_bound(definition, "minGraphemes"),
        max_graphemes=_bound(definition, "maxGraphemes"),
        path=path,
    )
    if "format" in definition:
        formats.validate_format(definition["format"], value, path)
    return value


def _validate_integer(path: str, definition: Mapping, value: Any) -> Any:
    if value is None:
        return _default_or_fail("integer", path, definition, "an")
    if not utils._is_integer(value):
        raise ValidationError(f"{path} must be an integer, got {value!r}")

    constraints.validate_const(value, definition.get("const"), path)
    constraints.validate_enum(value, definition.get("enum"), path)
    constraints.validate_range(
        value,
        minimum=_bound(definition, "minimum"),
        maximum=_bound(definition, "maximum"),
        path=path,
    )
    return value


def _validate_boolean(path: str, definition: Mapping, value: Any) -> Any:
    if value is None:
        return _default_or_fail("boolean", path, definition, "a")
    if not isinstance(value, bool):
        raise ValidationError(f"{path} must be a boolean, got {value!r}")

    constraints.validate_const(value, definition.get("const"), path)
    return value


def _validate_bytes(path: str, definition: Mapping, value: Any) -> Any:
    if not utils._is_bytes(value):
        raise ValidationError(f"{path} must be a byte array, got {value!r}")

    constraints.validate_length(
        value,
        min_length=_bound(definition, "minLength"),
        max_length=_bound(definition, "maxLength"),
        path=path,
        unit="bytes",
    )
    return value


def _validate_cid_link(path: str, value: Any) -> Any:
    # only the leading CID is checked; multibase suffixes are not decoded
    if isinstance(value, str) and _CID_LINK_RE.match(value):
        return value
    raise ValidationError(f"{path} must be a CID")


# --------------------------------------------------------------------------- #
# Opaque payloads                                                             #
# --------------------------------------------------------------------------- #

def _validate_unknown(path: str, value: Any) -> Any:
    if isinstance(value, Mapping):
        return value
    raise ValidationError(f"{path} must be an object")


def _validate_blob(path: str, value: Any) -> Any:
    if isinstance(value, Mapping) and (
        value.get(TYPE_KEY) == "blob" or ("ref" in value and "mimeType" in value)
    ):
        return value
    raise ValidationError(f"{path} should be a blob ref")
