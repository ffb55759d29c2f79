"""
lexicon_schema – validation of JSON-like data against lexicon schemas.
"""
import logging

from .api import (
    ValidationResult,
    validate,
    validate_error,
    validate_input,
    validate_message,
    validate_output,
    validate_parameters,
)
from .errors import DefinitionNotFoundError, LexiconError, ValidationError
from .lexicon import Lexicon

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Lexicon",
    "ValidationResult",
    "LexiconError",
    "ValidationError",
    "DefinitionNotFoundError",
    "validate",
    "validate_parameters",
    "validate_input",
    "validate_output",
    "validate_message",
    "validate_error",
]
