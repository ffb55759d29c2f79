"""
resolver.py - turn symbolic references into concrete definitions.

Reference spellings understood by :func:`resolve_ref`:

* ``#name``            - a definition in the current lexicon;
* ``other.nsid#name``  - looked up as ``name`` in the *current* lexicon.
  Lexicons are validated one at a time, so references into another
  document only resolve when the current one carries a definition of the
  same name;
* ``other.nsid``       - shorthand for ``other.nsid#main``, i.e. ``main``.
"""

from __future__ import annotations

from typing import Any, Sequence

from .errors import DefinitionNotFoundError
from .lexicon import Lexicon

__all__ = ["resolve_ref", "to_lex_uri", "refs_contain_type"]

_MAIN = "main"
_MAIN_SUFFIX = "#main"


def resolve_ref(lexicon: Lexicon, ref: Any) -> Any:
    """Return the definition *ref* points at inside *lexicon*."""
    if not isinstance(ref, str):
        raise DefinitionNotFoundError(f"Definition '{ref}' not found in schema")

    if ref.startswith("#"):
        name = ref[1:]
    elif "#" in ref:
        _nsid, name = ref.split("#", 1)
    else:
        name = _MAIN
    return lexicon.get_definition(name)


def to_lex_uri(value: str) -> str:
    """Normalise a ``$type`` value so it compares against union ``refs``."""
    if value.startswith("lex:") or value.startswith("#"):
        return value
    return f"lex:{value}"


def _local(value: str) -> str:
    # "lex:#name" and "#name" both denote a local definition
    return value[4:] if value.startswith("lex:#") else value


def refs_contain_type(refs: Sequence[str], type_value: str) -> bool:
    """True when *type_value* names one of the union members in *refs*.

    Union members and discriminators may each spell ``#main`` explicitly or
    leave it implicit, and local members may be written ``#name`` or
    ``lex:#name``; all of these spellings are equivalent.
    """
    members = {_local(ref) for ref in refs if isinstance(ref, str)}
    uri = _local(to_lex_uri(type_value))
    if uri in members:
        return True
    if uri.endswith(_MAIN_SUFFIX) and uri[: -len(_MAIN_SUFFIX)] in members:
        return True
    return "#" not in uri and f"{uri}{_MAIN_SUFFIX}" in members
