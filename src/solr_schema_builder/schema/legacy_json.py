"""Conversion between the internal analyzer model and Solr's JSON shape.

The Schema API still names analyzer stages by fixed keys (``indexAnalyzer``,
``queryAnalyzer``, ``multiTermAnalyzer`` and the bare ``analyzer``), while the
XML dialect and the configuration exports use a list of stages tagged with a
``type``. This module is the only place where the two meet.
"""

from __future__ import annotations

from collections.abc import Mapping
import copy
import re
from typing import Any

import orjson

from solr_schema_builder.errors import FieldTypeDecodeError
from solr_schema_builder.schema.analyzers import (
    KEY_NAME,
    Analyzer,
    AnalyzerKind,
    FieldTypeDefinition,
)


LEGACY_ANALYZER_KEYS: dict[AnalyzerKind, str] = {
    AnalyzerKind.INDEX: "indexAnalyzer",
    AnalyzerKind.QUERY: "queryAnalyzer",
    AnalyzerKind.MULTITERM: "multiTermAnalyzer",
    AnalyzerKind.PLAIN: "analyzer",
}
_LEGACY_KEY_KINDS = {key: kind for kind, key in LEGACY_ANALYZER_KEYS.items()}

_HTML_UNSAFE_PATTERN = re.compile(r"\\.|[<>&']", re.DOTALL)
_HTML_ESCAPES = {char: f"\\u{ord(char):04X}" for char in "<>&'\""}


def to_legacy_json(definition: FieldTypeDefinition) -> dict[str, Any]:
    """Re-key analyzer stages under the fixed legacy JSON names.

    A later stage of the same kind replaces an earlier one.
    """
    data: dict[str, Any] = {KEY_NAME: definition.name}
    data.update(copy.deepcopy(definition.attributes))
    for analyzer in definition.analyzers:
        data[LEGACY_ANALYZER_KEYS[analyzer.kind]] = analyzer.to_dict(include_kind=False)
    return data


def from_legacy_json(data: Mapping[str, Any]) -> FieldTypeDefinition:
    """Inverse of :func:`to_legacy_json`.

    Missing legacy keys are skipped, so a field type with only a bare
    ``analyzer`` is valid. Restored stages keep the order of their keys in
    ``data``, behind any stages already present under ``analyzers``.

    Raises:
        FieldTypeDecodeError: If the structure is not a valid field type
    """
    if not isinstance(data, Mapping):
        msg = f"Field type JSON must be an object, got {type(data).__name__}"
        raise FieldTypeDecodeError(msg)

    payload: dict[str, Any] = {}
    restored: list[Analyzer] = []
    for key, value in data.items():
        kind = _LEGACY_KEY_KINDS.get(key)
        if kind is None:
            payload[key] = value
        elif value:
            restored.append(Analyzer.from_dict(value, kind=kind))

    definition = FieldTypeDefinition.from_dict(payload)
    definition.analyzers.extend(restored)
    return definition


def _escape_html(match: re.Match[str]) -> str:
    token = match.group(0)
    if token == '\\"':
        return _HTML_ESCAPES['"']
    return _HTML_ESCAPES.get(token, token)


def encode_json(value: Any, *, pretty: bool = False) -> str:
    """Encode ``value`` as JSON that is safe to embed in HTML and XML.

    Angle brackets, ampersands, apostrophes and quotes inside strings are
    emitted as ``\\uXXXX`` escapes. ``pretty`` switches to indented output.
    """
    option = orjson.OPT_INDENT_2 if pretty else 0
    text = orjson.dumps(value, option=option).decode("utf-8")
    return _HTML_UNSAFE_PATTERN.sub(_escape_html, text)


def decode_json(text: str | bytes) -> Any:
    """Decode JSON text.

    Raises:
        FieldTypeDecodeError: If the text is not valid JSON
    """
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError as exc:
        msg = f"Malformed field type JSON: {exc}"
        raise FieldTypeDecodeError(msg) from exc
