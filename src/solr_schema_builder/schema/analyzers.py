"""Internal model for Solr field types and their analyzer chains.

A field type owns an ordered list of analyzer stages. Each stage is tagged with
an :class:`AnalyzerKind` and holds an optional tokenizer plus ordered char
filter and filter chains. Every tokenizer/filter is a plain mapping carrying at
least a ``class`` attribute, so unknown factory options survive untouched.

The dict shape produced by :meth:`FieldTypeDefinition.to_dict` is the one used
in configuration exports::

    name: text_en
    class: solr.TextField
    positionIncrementGap: 100
    analyzers:
      - type: index
        tokenizer: {class: solr.WhitespaceTokenizerFactory}
        filters:
          - {class: solr.LowerCaseFilterFactory}

Translation to the legacy Schema API keys lives in :mod:`legacy_json` only.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from solr_schema_builder.errors import FieldTypeDecodeError


KEY_NAME = "name"
KEY_CLASS = "class"
KEY_TYPE = "type"
KEY_ANALYZERS = "analyzers"
KEY_TOKENIZER = "tokenizer"
KEY_FILTERS = "filters"
KEY_CHAR_FILTERS = "charFilters"


class AnalyzerKind(str, Enum):
    """When an analyzer stage applies."""

    INDEX = "index"
    QUERY = "query"
    MULTITERM = "multiterm"
    PLAIN = ""

    @classmethod
    def from_value(cls, value: object) -> AnalyzerKind:
        """Resolve the ``type`` key of a stage; missing or empty means PLAIN."""
        if value is None or value == "":
            return cls.PLAIN
        try:
            return cls(str(value))
        except ValueError as exc:
            msg = f"Unknown analyzer type: {value!r}"
            raise FieldTypeDecodeError(msg) from exc


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        msg = f"{what} must be an object, got {type(value).__name__}"
        raise FieldTypeDecodeError(msg)
    return value


def _factory_list(value: Any, what: str) -> list[dict[str, Any]]:
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        msg = f"{what} must be a list of objects"
        raise FieldTypeDecodeError(msg)
    return [copy.deepcopy(dict(_require_mapping(item, what))) for item in value]


@dataclass
class Analyzer:
    """One analyzer stage: char filters, tokenizer, then filters."""

    kind: AnalyzerKind = AnalyzerKind.PLAIN
    tokenizer: dict[str, Any] | None = None
    filters: list[dict[str, Any]] = field(default_factory=list)
    char_filters: list[dict[str, Any]] = field(default_factory=list)
    attributes: dict[str, Any] = field(default_factory=dict)

    def to_dict(self, *, include_kind: bool = True) -> dict[str, Any]:
        """Serialize the stage; ``type`` is written only for qualified kinds."""
        data: dict[str, Any] = {}
        if include_kind and self.kind is not AnalyzerKind.PLAIN:
            data[KEY_TYPE] = self.kind.value
        data.update(copy.deepcopy(self.attributes))
        if self.char_filters:
            data[KEY_CHAR_FILTERS] = copy.deepcopy(self.char_filters)
        if self.tokenizer is not None:
            data[KEY_TOKENIZER] = copy.deepcopy(self.tokenizer)
        if self.filters:
            data[KEY_FILTERS] = copy.deepcopy(self.filters)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, kind: AnalyzerKind | None = None) -> Analyzer:
        """Deserialize a stage.

        Args:
            data: Stage mapping in config or legacy JSON shape
            kind: Kind implied by the enclosing key; overrides any ``type`` key

        Raises:
            FieldTypeDecodeError: On non-mapping input or an unknown kind
        """
        payload = dict(_require_mapping(data, "Analyzer definition"))
        raw_kind = payload.pop(KEY_TYPE, None)
        resolved_kind = kind if kind is not None else AnalyzerKind.from_value(raw_kind)

        raw_tokenizer = payload.pop(KEY_TOKENIZER, None)
        tokenizer = None
        if raw_tokenizer is not None:
            tokenizer = copy.deepcopy(dict(_require_mapping(raw_tokenizer, "Tokenizer")))

        return cls(
            kind=resolved_kind,
            tokenizer=tokenizer,
            filters=_factory_list(payload.pop(KEY_FILTERS, None), "filters"),
            char_filters=_factory_list(payload.pop(KEY_CHAR_FILTERS, None), "charFilters"),
            attributes=copy.deepcopy(payload),
        )


@dataclass
class FieldTypeDefinition:
    """A named Solr field type with its analyzer stages.

    ``attributes`` is an open map (``class``, ``positionIncrementGap``,
    ``similarity``, ...) kept in insertion order so serialized output is stable.
    """

    name: str
    analyzers: list[Analyzer] = field(default_factory=list)
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def class_name(self) -> str | None:
        value = self.attributes.get(KEY_CLASS)
        return str(value) if value is not None else None

    def iter_filters(self) -> Iterator[dict[str, Any]]:
        """Yield every filter of every analyzer stage in order."""
        for analyzer in self.analyzers:
            yield from analyzer.filters

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the configuration shape (``analyzers`` list)."""
        data: dict[str, Any] = {KEY_NAME: self.name}
        data.update(copy.deepcopy(self.attributes))
        if self.analyzers:
            data[KEY_ANALYZERS] = [analyzer.to_dict() for analyzer in self.analyzers]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FieldTypeDefinition:
        """Deserialize from the configuration shape."""
        payload = dict(_require_mapping(data, "Field type definition"))
        name = payload.pop(KEY_NAME, None)
        if not isinstance(name, str) or not name.strip():
            raise FieldTypeDecodeError("Field type definition requires a non-empty name")

        raw_analyzers = payload.pop(KEY_ANALYZERS, None)
        if raw_analyzers is None:
            raw_analyzers = []
        if isinstance(raw_analyzers, (str, bytes)) or not isinstance(raw_analyzers, Sequence):
            raise FieldTypeDecodeError("analyzers must be a list of objects")

        return cls(
            name=name,
            analyzers=[Analyzer.from_dict(item) for item in raw_analyzers],
            attributes=copy.deepcopy(payload),
        )
