"""
formats.py - string ``format`` validators for lexicon ``string`` definitions
===========================================================================

Each validator takes the error *path* and the string *value*, returns the
value unchanged when it is well formed and raises
:class:`~lexicon_schema.errors.ValidationError` otherwise.  None of them
depends on the surrounding schema.

Supported formats
-----------------
datetime, uri, at-uri, did, handle, at-identifier, nsid, cid, language, tid,
record-key.  Any other format name is accepted as-is so that lexicons using
newer formats still validate.
"""

from __future__ import annotations

import datetime as _dt
import re
from typing import Callable

from .errors import ValidationError

__all__ = [
    "FORMATS",
    "validate_format",
    "datetime",
    "uri",
    "at_uri",
    "did",
    "handle",
    "at_identifier",
    "nsid",
    "cid",
    "language",
    "tid",
    "record_key",
]

# --------------------------------------------------------------------------- #
# Patterns                                                                    #
# --------------------------------------------------------------------------- #

_DATETIME_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})"   # date & time
    r"(?:\.\d{1,9})?"                                   # optional fraction
    r"(?:Z|[+\-]\d{2}:\d{2})?",                         # optional offset
    re.ASCII,
)
_URI_RE = re.compile(r"\w+:(?://)?[^\s/][^\s]*", re.ASCII)
_AT_URI_RE = re.compile(
    r"at://[a-zA-Z0-9:._-]+"                            # authority (did or handle)
    r"/[a-z][a-z0-9.-]*\.[a-z][a-z0-9.-]*[a-z]"         # collection nsid
    r"/[a-zA-Z0-9._~:@!$&'()*+,;=%\[\]-]+"              # record key
)
_DID_RE = re.compile(r"did:[a-z]+:[a-zA-Z0-9._:%-]*[a-zA-Z0-9._-]")
_HANDLE_RE = re.compile(
    r"([a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+"
    r"[a-zA-Z]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
)
_NSID_RE = re.compile(
    r"[a-zA-Z](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+"
    r"(?:\.[a-zA-Z](?:[a-zA-Z0-9]{0,62})?)"
)
_CID_RE = re.compile(r"Qm[1-9A-HJ-NP-Za-km-z]{44}|b[a-z2-7]{58,}|[a-z0-9]{59,}")
_LANGUAGE_RE = re.compile(
    r"[a-z]{2,3}(-[A-Z][a-z]{3})?(-[A-Z]{2})?(-[a-zA-Z0-9]{5,8})*(-[a-zA-Z0-9]{1,8})*"
)
_TID_RE = re.compile(r"[234567abcdefghij][234567abcdefghijklmnopqrstuvwxyz]{12}")
_RECORD_KEY_RE = re.compile(r"[a-zA-Z0-9._~:@!$&'()*+,;=%\[\]-]+")

_HANDLE_MAX_LENGTH = 253
_NSID_MAX_LENGTH = 317
_RECORD_KEY_MAX_LENGTH = 512


def _check(pattern: re.Pattern, value: str, path: str, reason: str) -> str:
    if pattern.fullmatch(value) is None:
        raise ValidationError(f"{path} {reason}")
    return value


# --------------------------------------------------------------------------- #
# Validators                                                                  #
# --------------------------------------------------------------------------- #

def datetime(path: str, value: str) -> str:
    """ISO-8601 / RFC-3339 timestamp whose date and time fields are real."""
    reason = "must be an valid atproto datetime (both RFC-3339 and ISO-8601)"
    m = _DATETIME_RE.fullmatch(value)
    if m is None:
        raise ValidationError(f"{path} {reason}")
    try:
        _dt.datetime(*(int(part) for part in m.groups()))
    except ValueError as exc:
        raise ValidationError(f"{path} {reason}") from exc
    return value


def uri(path: str, value: str) -> str:
    return _check(_URI_RE, value, path, "must be a uri")


def at_uri(path: str, value: str) -> str:
    return _check(_AT_URI_RE, value, path, "must be a valid at-uri")


def did(path: str, value: str) -> str:
    return _check(_DID_RE, value, path, "must be a valid did")


def handle(path: str, value: str) -> str:
    if len(value) > _HANDLE_MAX_LENGTH:
        raise ValidationError(f"{path} must be a valid handle")
    return _check(_HANDLE_RE, value, path, "must be a valid handle")


def at_identifier(path: str, value: str) -> str:
    """Either a DID (when prefixed ``did:``) or a handle."""
    check = did if value.startswith("did:") else handle
    try:
        return check(path, value)
    except ValidationError as exc:
        raise ValidationError(f"{path} must be a valid did or a handle") from exc


def nsid(path: str, value: str) -> str:
    if len(value) > _NSID_MAX_LENGTH:
        raise ValidationError(f"{path} must be a valid nsid")
    return _check(_NSID_RE, value, path, "must be a valid nsid")


def cid(path: str, value: str) -> str:
    return _check(_CID_RE, value, path, "must be a cid string")


def language(path: str, value: str) -> str:
    return _check(_LANGUAGE_RE, value, path, "must be a well-formed BCP 47 language tag")


def tid(path: str, value: str) -> str:
    return _check(_TID_RE, value, path, "must be a valid TID")


def record_key(path: str, value: str) -> str:
    if not value or len(value) > _RECORD_KEY_MAX_LENGTH:
        raise ValidationError(f"{path} must be a valid Record Key")
    return _check(_RECORD_KEY_RE, value, path, "must be a valid Record Key")


FORMATS: dict[str, Callable[[str, str], str]] = {
    "datetime": datetime,
    "uri": uri,
    "at-uri": at_uri,
    "did": did,
    "handle": handle,
    "at-identifier": at_identifier,
    "nsid": nsid,
    "cid": cid,
    "language": language,
    "tid": tid,
    "record-key": record_key,
}


def validate_format(fmt: str, value: str, path: str) -> str:
    """Dispatch *value* to the validator registered for *fmt*."""
    check = FORMATS.get(fmt) if isinstance(fmt, str) else None
    if check is None:
        return value
    return check(path, value)
