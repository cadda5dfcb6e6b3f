"""Solr field naming helpers.

Solr field names should only contain ASCII letters, digits and underscores and
must not start with a digit. Generated names (dynamic field patterns, sort
fields, spellcheck fields) pass through :func:`encode_solr_name` so that any
language code or custom code can be embedded safely.

Encoding scheme:
    Every offending character is replaced by ``_X`` + lowercase hex of its
    UTF-8 bytes + ``_``. A literal ``_X`` pair is escaped the same way, which
    keeps the mapping injective and makes :func:`decode_solr_name` exact.

Example:
    >>> encode_solr_name("ts;de-at_")
    'ts_X3b_de_X2d_at_'
    >>> decode_solr_name("ts_X3b_de_X2d_at_")
    'ts;de-at_'
"""

from __future__ import annotations

import re


# Separates the field prefix from the language code in dynamic field names.
LANGUAGE_SEPARATOR = ";"

# Language code used by field types that are not bound to a language.
LANGCODE_NOT_SPECIFIED = "und"

DEFAULT_DOMAIN = "generic"

_UNSAFE_PATTERN = re.compile(r"_X|[^0-9A-Za-z_]|^[0-9]")
_ESCAPE_PATTERN = re.compile(r"_X([0-9a-f]+)_")


def _escape(match: re.Match[str]) -> str:
    return "_X" + match.group(0).encode("utf-8").hex() + "_"


def _unescape(match: re.Match[str]) -> str:
    return bytes.fromhex(match.group(1)).decode("utf-8")


def encode_solr_name(raw: str) -> str:
    """Encode an arbitrary string into Solr's field naming alphabet."""
    return _UNSAFE_PATTERN.sub(_escape, raw)


def decode_solr_name(encoded: str) -> str:
    """Reverse :func:`encode_solr_name`."""
    return _ESCAPE_PATTERN.sub(_unescape, encoded)


def is_safe_solr_name(name: str) -> bool:
    """Return True when ``name`` passes through the encoder unchanged."""
    return encode_solr_name(name) == name
