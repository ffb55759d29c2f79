"""
api.py - public entry points
============================

Every function takes a lexicon (a decoded mapping or a
:class:`~lexicon_schema.lexicon.Lexicon`), the name of a definition in it
and the value to check, and returns a :class:`ValidationResult`.  Nothing is
raised for invalid data or malformed lexicons; the failure message is
carried on the result instead.

Public API
----------
validate(schema, name, value)
validate_parameters(schema, name, value)
validate_input(schema, name, value)
validate_output(schema, name, value)
validate_message(schema, name, value)
validate_error(schema, name, error_name, value)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from . import validator
from . import xrpc
from .errors import LexiconError, ValidationError
from .lexicon import Lexicon

__all__ = [
    "ValidationResult",
    "validate",
    "validate_parameters",
    "validate_input",
    "validate_output",
    "validate_message",
    "validate_error",
]

log = logging.getLogger(__name__)

SchemaLike = Union[Lexicon, Mapping[str, Any]]


# --------------------------------------------------------------------------- #
# Result                                                                      #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation call: ``(ok, value)`` or ``(error, message)``."""

    ok: bool
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: Any) -> "ValidationResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, message: str) -> "ValidationResult":
        return cls(ok=False, error=message)

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> Any:
        """Return the validated value or raise :class:`ValidationError`."""
        if not self.ok:
            raise ValidationError(self.error)
        return self.value


# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #

def _run(schema: SchemaLike, name: str, value: Any, part: Optional[str] = None,
         error_name: Optional[str] = None) -> ValidationResult:
    """Look *name* up, optionally tag *value* with an XRPC part, then validate."""
    try:
        lexicon = Lexicon.from_mapping(schema)
        definition = lexicon.get_definition(name)
        log.debug("validating %s#%s (part=%s)", lexicon.id, name, part or "-")

        if part is not None:
            if not isinstance(definition, Mapping) or definition.get("type") not in xrpc.ENDPOINT_TYPES:
                raise LexiconError(f"Definition '{name}' is not an XRPC endpoint")
            if not isinstance(value, Mapping):
                raise ValidationError(f"{name} must be an object")
            value = xrpc.tag(value, part, error_name)

        validated = validator.validate_one(lexicon, name, definition, value)
    except LexiconError as exc:
        log.debug("validation of %r failed: %s", name, exc)
        return ValidationResult.failure(str(exc))
    except RecursionError:
        message = f"{name} exceeds the maximum nesting depth"
        log.debug("validation of %r failed: %s", name, message)
        return ValidationResult.failure(message)

    return ValidationResult.success(validated)


# --------------------------------------------------------------------------- #
# Public entry points                                                         #
# --------------------------------------------------------------------------- #

def validate(schema: SchemaLike, name: str, value: Any) -> ValidationResult:
    """Validate *value* against definition *name*, applying defaults.

    >>> schema = {"lexicon": 1, "id": "com.example.post", "defs": {"main": {
    ...     "type": "object", "required": ["text"],
    ...     "properties": {"text": {"type": "string", "maxLength": 300}}}}}
    >>> validate(schema, "main", {"text": "Hello world!"}).value
    {'text': 'Hello world!'}
    >>> validate(schema, "main", {}).error
    'main must have the property "text"'
    """
    return _run(schema, name, value)


def validate_parameters(schema: SchemaLike, name: str, value: Any) -> ValidationResult:
    """Validate URL/query-string parameters of endpoint *name*."""
    return _run(schema, name, value, part="parameters")


def validate_input(schema: SchemaLike, name: str, value: Any) -> ValidationResult:
    """Validate the request body of endpoint *name*."""
    return _run(schema, name, value, part="input")


def validate_output(schema: SchemaLike, name: str, value: Any) -> ValidationResult:
    """Validate the response body of endpoint *name*."""
    return _run(schema, name, value, part="output")


def validate_message(schema: SchemaLike, name: str, value: Any) -> ValidationResult:
    """Validate one streamed message of subscription *name*."""
    return _run(schema, name, value, part="message")


def validate_error(schema: SchemaLike, name: str, error_name: str, value: Any) -> ValidationResult:
    """Validate the payload of the error called *error_name* raised by endpoint *name*."""
    return _run(schema, name, value, part="error", error_name=error_name)
