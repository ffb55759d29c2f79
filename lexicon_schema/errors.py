"""
errors.py - exception hierarchy shared by every validation module.
"""

from __future__ import annotations

__all__ = [
    "LexiconError",
    "ValidationError",
    "DefinitionNotFoundError",
]


class LexiconError(ValueError):
    """Raised when a lexicon document itself is malformed."""


class ValidationError(LexiconError):
    """Raised when a value violates the definition it is checked against.

    ``str(exc)`` is the full ``"<path> <reason>"`` message.
    """


class DefinitionNotFoundError(ValidationError):
    """Raised when a definition name or reference cannot be resolved."""
