"""
xrpc.py - validation of XRPC endpoint definitions
=================================================

``query``, ``procedure`` and ``subscription`` definitions describe up to five
payloads: URL ``parameters``, request ``input``, response ``output``, a
streamed ``message`` and named ``errors``.  The payload being checked
travels on the value itself as a ``$xrpc`` tag (plus ``$error`` for error
payloads); an untagged value is treated as ``input``.  Tags are stripped
before validation and never appear in the result.

An endpoint that does not declare the requested part accepts any payload.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from . import validator
from .errors import ValidationError
from .lexicon import Lexicon

__all__ = [
    "ENDPOINT_TYPES",
    "PARTS",
    "PART_KEY",
    "ERROR_KEY",
    "tag",
    "validate_endpoint",
]

ENDPOINT_TYPES = ("query", "procedure", "subscription")
PARTS = ("parameters", "input", "output", "message", "error")

PART_KEY = "$xrpc"
ERROR_KEY = "$error"

_DEFAULT_PART = "input"


# --------------------------------------------------------------------------- #
# Tagging                                                                     #
# --------------------------------------------------------------------------- #

def tag(value: Any, part: str, error_name: Optional[str] = None) -> dict[str, Any]:
    """Return a copy of *value* marked with the endpoint *part* it belongs to."""
    if part not in PARTS:
        raise ValueError(f"unknown XRPC part {part!r}; expected one of {PARTS}")
    tagged = dict(value)
    tagged[PART_KEY] = part
    if error_name is not None:
        tagged[ERROR_KEY] = error_name
    return tagged


def _untag(value: Any) -> tuple[str, Optional[str], Any]:
    if not isinstance(value, Mapping) or PART_KEY not in value:
        return _DEFAULT_PART, None, value
    part = value[PART_KEY]
    if part != "error":
        # ``$error`` only tags error payloads; elsewhere it is ordinary data
        return part, None, {k: v for k, v in value.items() if k != PART_KEY}
    payload = {k: v for k, v in value.items() if k not in (PART_KEY, ERROR_KEY)}
    return part, value.get(ERROR_KEY), payload


# --------------------------------------------------------------------------- #
# Endpoint validation                                                         #
# --------------------------------------------------------------------------- #

def validate_endpoint(lexicon: Lexicon, path: str, definition: Mapping, value: Any) -> Any:
    """Validate the tagged part of *value* against endpoint *definition*."""
    part, error_name, payload = _untag(value)

    if part == "parameters":
        return _validate_parameters(lexicon, path, definition.get("parameters"), payload)
    if part in ("input", "output", "message"):
        return _validate_body(lexicon, path, part, definition.get(part), payload)
    if part == "error":
        return _validate_error(lexicon, path, definition.get("errors"), error_name, payload)

    raise ValidationError(f"{path} has an unknown XRPC part '{part}'")


def _validate_parameters(lexicon: Lexicon, path: str, params_def: Any, value: Any) -> Any:
    if params_def is None:
        return value
    if not isinstance(params_def, Mapping) or params_def.get("type") != "params":
        raise ValidationError(f"{path} has an invalid parameters definition")
    return validator.validate_object(lexicon, path, params_def, value, noun="parameter")


def _validate_body(lexicon: Lexicon, path: str, part: str, body_def: Any, value: Any) -> Any:
    """``input`` / ``output`` / ``message``: a ``{"schema": ...}`` wrapper or a bare definition."""
    if body_def is None:
        return value
    if not isinstance(body_def, Mapping):
        raise ValidationError(f"{path} has an invalid {part} definition")

    if "schema" in body_def:
        schema_def = body_def["schema"]
    elif "type" in body_def:
        schema_def = body_def
    else:
        # e.g. {"encoding": "*/*"}: opaque body
        return value

    if schema_def is None:
        return value
    return validator.validate_one(lexicon, path, schema_def, value)


def _validate_error(
    lexicon: Lexicon,
    path: str,
    errors: Any,
    error_name: Optional[str],
    value: Any,
) -> Any:
    if not errors:
        raise ValidationError(f"{path} has no errors defined")
    if not isinstance(errors, (list, tuple)):
        raise ValidationError(f"{path} has an invalid errors definition")

    entries = [e for e in errors if isinstance(e, Mapping)]
    for entry in entries:
        if entry.get("name") == error_name:
            schema_def = entry.get("schema")
            if schema_def is None:
                return value
            return validator.validate_one(lexicon, path, schema_def, value)

    names = ", ".join(str(e.get("name")) for e in entries)
    raise ValidationError(f"{path} unknown error '{error_name}', expected one of: {names}")
