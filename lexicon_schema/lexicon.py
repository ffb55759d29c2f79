"""
lexicon.py - the in-memory lexicon document and its high-level API.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import DefinitionNotFoundError, LexiconError

__all__ = ["Lexicon"]


@dataclass(frozen=True)
class Lexicon:
    """A decoded lexicon document: version, NSID and its definition table.

    Instances are never modified by validation, so a single ``Lexicon`` can be
    shared between threads.
    """

    id: Optional[str]
    defs: Mapping[str, Any]
    lexicon: Optional[int] = 1
    description: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_mapping(cls, data: Any) -> "Lexicon":
        """Wrap an already-decoded lexicon mapping (``{"lexicon", "id", "defs"}``)."""
        if isinstance(data, Lexicon):
            return data
        if not isinstance(data, Mapping) or not isinstance(data.get("defs"), Mapping):
            raise LexiconError("Invalid schema: missing 'defs' field")
        return cls(
            id=data.get("id"),
            defs=data["defs"],
            lexicon=data.get("lexicon"),
            description=data.get("description"),
        )

    def get_definition(self, name: str) -> Any:
        """Return the definition called *name* or raise :class:`DefinitionNotFoundError`."""
        try:
            return self.defs[name]
        except (KeyError, TypeError):
            raise DefinitionNotFoundError(f"Definition '{name}' not found in schema") from None

    # ------------------------------------------------------------------ #
    # Validation shortcuts (see lexicon_schema.api)                       #
    # ------------------------------------------------------------------ #

    def validate(self, name: str, value: Any):
        from . import api
        return api.validate(self, name, value)

    def validate_parameters(self, name: str, value: Any):
        from . import api
        return api.validate_parameters(self, name, value)

    def validate_input(self, name: str, value: Any):
        from . import api
        return api.validate_input(self, name, value)

    def validate_output(self, name: str, value: Any):
        from . import api
        return api.validate_output(self, name, value)

    def validate_message(self, name: str, value: Any):
        from . import api
        return api.validate_message(self, name, value)

    def validate_error(self, name: str, error_name: str, value: Any):
        from . import api
        return api.validate_error(self, name, error_name, value)
