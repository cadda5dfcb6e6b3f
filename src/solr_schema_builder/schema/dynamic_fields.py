"""Dynamic field declarations derived from a language-specific field type.

For every field type the schema gets a family of dynamic fields whose name
pattern encodes the indexing options and the language:

    <prefix><cardinality>;<langcode>_*      e.g. ts;de_*, tom;en_*, tucars;ar_*

- prefix ``t``/``to``/``tu`` (or ``tc<code>``/``toc<code>``/``tuc<code>``
  for custom codes): plain text, text without norms, unstemmed text
- cardinality ``s``/``m``: single or multi valued

Field types for the "not specified" language also emit language-agnostic
fallbacks (``ts_*``) that catch every language without a dedicated config.
Declaration order matters: Solr resolves overlapping patterns by declaration.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Protocol

from solr_schema_builder.naming import LANGCODE_NOT_SPECIFIED, LANGUAGE_SEPARATOR, encode_solr_name
from solr_schema_builder.schema.analyzers import FieldTypeDefinition


CARDINALITIES = ("s", "m")
DEFAULT_PREFIXES = ("t", "to", "tu")

# Solr 3 and 4 need the sort field indexed and without docValues.
DOC_VALUES_MIN_SOLR_VERSION = 5


class DynamicFieldSource(Protocol):
    """What the deriver needs to know about a field type entity."""

    custom_code: str | None
    field_type_language_code: str

    def get_name(self) -> str:  # pragma: no cover - interface definition
        ...

    def get_unstemmed_field_type(self) -> FieldTypeDefinition | None:  # pragma: no cover
        ...

    def get_spellcheck_field_type(self) -> FieldTypeDefinition | None:  # pragma: no cover
        ...

    def get_collated_field_type(self) -> FieldTypeDefinition | None:  # pragma: no cover
        ...


@dataclass(frozen=True)
class DynamicFieldDeclaration:
    """A ``<dynamicField/>`` schema declaration.

    Optional flags left as ``None`` are not written at all.
    """

    name: str
    type: str
    stored: bool = True
    indexed: bool = True
    multi_valued: bool | None = None
    term_vectors: bool | None = None
    omit_norms: bool | None = None
    doc_values: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with Solr attribute names."""
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "stored": self.stored,
            "indexed": self.indexed,
        }
        optional = {
            "multiValued": self.multi_valued,
            "termVectors": self.term_vectors,
            "omitNorms": self.omit_norms,
            "docValues": self.doc_values,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data


def field_prefixes(custom_code: str | None) -> tuple[str, str, str]:
    """Return the text, omit-norms and unstemmed prefixes."""
    if custom_code:
        return (f"tc{custom_code}", f"toc{custom_code}", f"tuc{custom_code}")
    return DEFAULT_PREFIXES


def derive_dynamic_fields(
    source: DynamicFieldSource,
    solr_major_version: int | None = None,
) -> list[DynamicFieldDeclaration]:
    """Build the ordered dynamic field declarations for ``source``.

    Order: prefix groups (``s`` before ``m``, each fallback right after its
    primary), then spellcheck, then collated sort fields.

    Raises:
        MissingFieldTypeError: If ``source`` has no base field type
    """
    language_code = source.field_type_language_code
    unspecified = language_code == LANGCODE_NOT_SPECIFIED
    base_name = source.get_name()
    unstemmed = source.get_unstemmed_field_type()

    fields: list[DynamicFieldDeclaration] = []
    for prefix_without_cardinality in field_prefixes(source.custom_code):
        for cardinality in CARDINALITIES:
            prefix = prefix_without_cardinality + cardinality
            field_type_name = base_name
            if prefix.startswith("tu") and unstemmed is not None:
                field_type_name = unstemmed.name

            declaration = DynamicFieldDeclaration(
                name=encode_solr_name(f"{prefix}{LANGUAGE_SEPARATOR}{language_code}_") + "*",
                type=field_type_name,
                stored=True,
                indexed=True,
                multi_valued=cardinality == "m",
                term_vectors=True,
                omit_norms=prefix.startswith("to"),
            )
            fields.append(declaration)
            if unspecified:
                fields.append(replace(declaration, name=encode_solr_name(prefix) + "_*"))

    spellcheck_field = spellcheck_declaration(source)
    if spellcheck_field is not None:
        fields.append(spellcheck_field)
        if unspecified:
            fields.append(replace(spellcheck_field, name="spellcheck_*"))

    collated_field = collated_declaration(source, solr_major_version)
    if collated_field is not None:
        fields.append(collated_field)
        if unspecified:
            fields.append(replace(collated_field, name="sort_*"))

    return fields


def spellcheck_declaration(source: DynamicFieldSource) -> DynamicFieldDeclaration | None:
    """Return the spellcheck field, or None without a spellcheck variant."""
    spellcheck = source.get_spellcheck_field_type()
    if spellcheck is None:
        return None
    # solrconfig.xml refers to this name without the language separator, and
    # no field name is ever appended, hence '*' instead of '_*'.
    return DynamicFieldDeclaration(
        name=f"spellcheck_{source.field_type_language_code}*",
        type=spellcheck.name,
        stored=True,
        indexed=True,
        multi_valued=True,
        term_vectors=True,
        omit_norms=True,
    )


def collated_declaration(
    source: DynamicFieldSource,
    solr_major_version: int | None = None,
) -> DynamicFieldDeclaration | None:
    """Return the sort field, or None without a collated variant."""
    collated = source.get_collated_field_type()
    if collated is None:
        return None
    doc_values = None
    if solr_major_version is not None and solr_major_version >= DOC_VALUES_MIN_SOLR_VERSION:
        doc_values = False
    return DynamicFieldDeclaration(
        name=encode_solr_name(f"sort{LANGUAGE_SEPARATOR}{source.field_type_language_code}") + "_*",
        type=collated.name,
        stored=False,
        indexed=True,
        doc_values=doc_values,
    )
