"""Solr field type aggregate.

A ``SolrFieldType`` bundles everything a language-specific text field needs in
a Solr config set:

- the base field type plus optional spellcheck, unstemmed and collated
  variants
- the language code, custom code and content domains it targets
- solrconfig snippets and auxiliary text files (stopwords, synonyms, ...)

The entity itself never performs I/O. Loading lives in
:mod:`solr_schema_builder.adapters`, assembly of complete config sets in
:mod:`solr_schema_builder.schema.config_set`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import copy
from dataclasses import dataclass, field
import logging
from typing import Any

from solr_schema_builder.errors import MissingFieldTypeError
from solr_schema_builder.naming import DEFAULT_DOMAIN, LANGCODE_NOT_SPECIFIED
from solr_schema_builder.schema.analyzers import FieldTypeDefinition
from solr_schema_builder.schema.dynamic_fields import DynamicFieldDeclaration, derive_dynamic_fields
from solr_schema_builder.schema.legacy_json import decode_json, encode_json, from_legacy_json, to_legacy_json
from solr_schema_builder.schema.xml_builder import build_comment, build_xml


logger = logging.getLogger(__name__)

MANAGED_FILTER_PREFIX = "solr.Managed"


def _coerce_definition(value: FieldTypeDefinition | Mapping[str, Any] | None) -> FieldTypeDefinition | None:
    if value is None or isinstance(value, FieldTypeDefinition):
        return value
    return FieldTypeDefinition.from_dict(value)


def _variant_from_json(text: str) -> FieldTypeDefinition | None:
    if not text.strip():
        return None
    data = decode_json(text)
    if data is None:
        return None
    return FieldTypeDefinition.from_dict(data)


@dataclass
class SolrFieldType:
    """Aggregate root for one language-specific Solr field type configuration.

    Mutable through its setters; treat instances as read-only while a schema
    is being generated from them.
    """

    id: str
    label: str = ""
    minimum_solr_version: str = "0.0.0"
    custom_code: str | None = None
    field_type_language_code: str = LANGCODE_NOT_SPECIFIED
    domains: list[str] = field(default_factory=list)
    field_type: FieldTypeDefinition | None = None
    spellcheck_field_type: FieldTypeDefinition | None = None
    unstemmed_field_type: FieldTypeDefinition | None = None
    collated_field_type: FieldTypeDefinition | None = None
    solr_configs: dict[str, Any] = field(default_factory=dict)
    text_files: dict[str, str] = field(default_factory=dict)

    # --- Field type accessors ---

    def get_field_type(self) -> FieldTypeDefinition | None:
        return self.field_type

    def set_field_type(self, field_type: FieldTypeDefinition | Mapping[str, Any]) -> SolrFieldType:
        self.field_type = _coerce_definition(field_type)
        return self

    def get_spellcheck_field_type(self) -> FieldTypeDefinition | None:
        return self.spellcheck_field_type

    def set_spellcheck_field_type(
        self, spellcheck_field_type: FieldTypeDefinition | Mapping[str, Any] | None
    ) -> SolrFieldType:
        self.spellcheck_field_type = _coerce_definition(spellcheck_field_type)
        return self

    def get_unstemmed_field_type(self) -> FieldTypeDefinition | None:
        return self.unstemmed_field_type

    def set_unstemmed_field_type(
        self, unstemmed_field_type: FieldTypeDefinition | Mapping[str, Any] | None
    ) -> SolrFieldType:
        self.unstemmed_field_type = _coerce_definition(unstemmed_field_type)
        return self

    def get_collated_field_type(self) -> FieldTypeDefinition | None:
        return self.collated_field_type

    def set_collated_field_type(
        self, collated_field_type: FieldTypeDefinition | Mapping[str, Any] | None
    ) -> SolrFieldType:
        self.collated_field_type = _coerce_definition(collated_field_type)
        return self

    def get_name(self) -> str:
        """Return the base field type name.

        Raises:
            MissingFieldTypeError: If no named base field type was set
        """
        return self._require_field_type().name

    def get_field_type_name(self) -> str:
        """Like :meth:`get_name` but returns an empty string when unset."""
        return self.field_type.name if self.field_type is not None else ""

    def get_custom_code(self) -> str | None:
        return self.custom_code

    def get_field_type_language_code(self) -> str:
        return self.field_type_language_code

    def get_domains(self) -> list[str]:
        """Return the targeted domains, ``["generic"]`` when none are set."""
        domains = list(dict.fromkeys(domain for domain in self.domains if domain))
        return domains or [DEFAULT_DOMAIN]

    def get_options(self) -> list[str]:
        return self.get_domains()

    def get_solr_configs(self) -> dict[str, Any]:
        return self.solr_configs

    def get_text_files(self) -> dict[str, str]:
        return self.text_files

    def _require_field_type(self) -> FieldTypeDefinition:
        if self.field_type is None or not self.field_type.name:
            msg = f"Solr field type '{self.id}' has no base field type"
            raise MissingFieldTypeError(msg)
        return self.field_type

    # --- JSON representations ---

    def get_field_type_as_json(self, pretty: bool = False) -> str:
        """Return the base field type in the Schema API JSON shape."""
        return encode_json(to_legacy_json(self._require_field_type()), pretty=pretty)

    def set_field_type_as_json(self, field_type: str) -> SolrFieldType:
        """Replace the base field type from Schema API JSON.

        Raises:
            FieldTypeDecodeError: If the JSON is malformed; nothing is changed
        """
        self.field_type = from_legacy_json(decode_json(field_type))
        logger.debug("Field type %s replaced from JSON", self.id)
        return self

    def get_spellcheck_field_type_as_json(self, pretty: bool = False) -> str:
        return self._variant_as_json(self.spellcheck_field_type, pretty)

    def set_spellcheck_field_type_as_json(self, spellcheck_field_type: str) -> SolrFieldType:
        self.spellcheck_field_type = _variant_from_json(spellcheck_field_type)
        return self

    def get_unstemmed_field_type_as_json(self, pretty: bool = False) -> str:
        return self._variant_as_json(self.unstemmed_field_type, pretty)

    def set_unstemmed_field_type_as_json(self, unstemmed_field_type: str) -> SolrFieldType:
        self.unstemmed_field_type = _variant_from_json(unstemmed_field_type)
        return self

    def get_collated_field_type_as_json(self, pretty: bool = False) -> str:
        return self._variant_as_json(self.collated_field_type, pretty)

    def set_collated_field_type_as_json(self, collated_field_type: str) -> SolrFieldType:
        self.collated_field_type = _variant_from_json(collated_field_type)
        return self

    @staticmethod
    def _variant_as_json(definition: FieldTypeDefinition | None, pretty: bool) -> str:
        if definition is None:
            return ""
        return encode_json(definition.to_dict(), pretty=pretty)

    # --- XML representations ---

    def get_as_xml(self, add_comment: bool = True) -> str:
        """Return the base ``<fieldType>`` fragment for schema_extra_types.xml."""
        return self._sub_field_type_as_xml(self._require_field_type(), add_comment=add_comment)

    def get_spellcheck_field_type_as_xml(self, add_comment: bool = True) -> str:
        if self.spellcheck_field_type is None:
            return ""
        return self._sub_field_type_as_xml(self.spellcheck_field_type, " spellcheck", add_comment)

    def get_collated_field_type_as_xml(self, add_comment: bool = True) -> str:
        if self.collated_field_type is None:
            return ""
        return self._sub_field_type_as_xml(self.collated_field_type, " collated", add_comment)

    def get_unstemmed_field_type_as_xml(self, add_comment: bool = True) -> str:
        if self.unstemmed_field_type is None:
            return ""
        return self._sub_field_type_as_xml(self.unstemmed_field_type, " unstemmed", add_comment)

    def _sub_field_type_as_xml(
        self,
        definition: FieldTypeDefinition,
        additional_label: str = "",
        add_comment: bool = True,
    ) -> str:
        formatted_xml = build_xml("fieldType", definition.to_dict())
        if not add_comment:
            return formatted_xml
        return build_comment(self.label + additional_label, self.minimum_solr_version) + formatted_xml

    def get_solr_configs_as_xml(self, add_comment: bool = True) -> str:
        """Render solrconfig snippets, e.g. ``searchComponents`` entries.

        A list under ``searchComponents`` renders one ``<searchComponent>`` per
        entry; raw strings are emitted verbatim.
        """
        if not self.solr_configs:
            return ""

        parts: list[str] = []
        if add_comment:
            parts.append(build_comment(self.label, self.minimum_solr_version))
        for key, configs in self.solr_configs.items():
            if isinstance(configs, str):
                parts.append(configs if configs.endswith("\n") else configs + "\n")
            elif isinstance(configs, (list, tuple)):
                element_name = key.rstrip("s") or key
                parts.extend(build_xml(element_name, config) for config in configs)
            else:
                parts.append(build_xml(key, configs))
        return "".join(parts)

    # --- Derived schema fields ---

    def get_dynamic_fields(self, solr_major_version: int | None = None) -> list[DynamicFieldDeclaration]:
        """Return the dynamic field declarations for this field type."""
        dynamic_fields = derive_dynamic_fields(self, solr_major_version)
        logger.debug("Derived %d dynamic fields for %s", len(dynamic_fields), self.id)
        return dynamic_fields

    def get_static_fields(self) -> list[DynamicFieldDeclaration]:
        return []

    def get_copy_fields(self) -> list[dict[str, Any]]:
        return []

    def requires_managed_schema(self) -> bool:
        """True when any base analyzer filter is a ``solr.Managed*`` factory."""
        if self.field_type is None:
            return False
        return any(
            str(token_filter.get("class", "")).startswith(MANAGED_FILTER_PREFIX)
            for token_filter in self.field_type.iter_filters()
        )

    # --- Text files ---

    def text_file_name(self, name: str) -> str:
        """Return the conf file name for text file ``name``.

        Example: ``stopwords`` of a ``de`` type becomes ``stopwords_de.txt``.
        """
        if self.custom_code:
            name = f"{name}_{self.custom_code}"
        return f"{name}_{self.field_type_language_code}.txt"

    def get_text_file_names(self) -> dict[str, str]:
        """Map conf file names to text file contents."""
        return {self.text_file_name(name): content for name, content in self.text_files.items()}

    # --- Aggregations over all configured field types ---

    @staticmethod
    def get_available_domains(field_types: Iterable[SolrFieldType]) -> list[str]:
        """Sorted union of all domains; always contains ``generic``."""
        domains = {DEFAULT_DOMAIN}
        for solr_field_type in field_types:
            domains.update(domain for domain in solr_field_type.domains if domain)
        return sorted(domains)

    @staticmethod
    def get_available_custom_codes(field_types: Iterable[SolrFieldType]) -> list[str]:
        """Distinct non-empty custom codes in first-seen order."""
        custom_codes: list[str] = []
        for solr_field_type in field_types:
            custom_code = solr_field_type.custom_code
            if custom_code and custom_code not in custom_codes:
                custom_codes.append(custom_code)
        return custom_codes


class SolrFieldTypeBuilder:
    """Collects configuration and produces a fully populated ``SolrFieldType``.

    Example:
        >>> entity = (
        ...     SolrFieldTypeBuilder("text_de_7_0_0")
        ...     .with_label("German Text Field")
        ...     .with_language_code("de")
        ...     .with_field_type({"name": "text_de", "class": "solr.TextField"})
        ...     .build()
        ... )
        >>> entity.get_name()
        'text_de'
    """

    def __init__(self, field_type_id: str) -> None:
        self._values: dict[str, Any] = {"id": field_type_id}

    def with_label(self, label: str) -> SolrFieldTypeBuilder:
        self._values["label"] = label
        return self

    def with_minimum_solr_version(self, version: str) -> SolrFieldTypeBuilder:
        self._values["minimum_solr_version"] = version
        return self

    def with_custom_code(self, custom_code: str | None) -> SolrFieldTypeBuilder:
        self._values["custom_code"] = custom_code or None
        return self

    def with_language_code(self, language_code: str) -> SolrFieldTypeBuilder:
        self._values["field_type_language_code"] = language_code
        return self

    def with_domains(self, domains: Iterable[str]) -> SolrFieldTypeBuilder:
        self._values["domains"] = list(domains)
        return self

    def with_field_type(self, field_type: FieldTypeDefinition | Mapping[str, Any]) -> SolrFieldTypeBuilder:
        self._values["field_type"] = _coerce_definition(field_type)
        return self

    def with_spellcheck_field_type(
        self, field_type: FieldTypeDefinition | Mapping[str, Any] | None
    ) -> SolrFieldTypeBuilder:
        self._values["spellcheck_field_type"] = _coerce_definition(field_type)
        return self

    def with_unstemmed_field_type(
        self, field_type: FieldTypeDefinition | Mapping[str, Any] | None
    ) -> SolrFieldTypeBuilder:
        self._values["unstemmed_field_type"] = _coerce_definition(field_type)
        return self

    def with_collated_field_type(
        self, field_type: FieldTypeDefinition | Mapping[str, Any] | None
    ) -> SolrFieldTypeBuilder:
        self._values["collated_field_type"] = _coerce_definition(field_type)
        return self

    def with_solr_configs(self, solr_configs: Mapping[str, Any]) -> SolrFieldTypeBuilder:
        self._values["solr_configs"] = dict(solr_configs)
        return self

    def with_text_file(self, name: str, content: str) -> SolrFieldTypeBuilder:
        self._values.setdefault("text_files", {})[name] = content
        return self

    def build(self) -> SolrFieldType:
        """Return a new entity; the builder can be reused afterwards.

        Raises:
            MissingFieldTypeError: If no named base field type was configured
        """
        field_type = self._values.get("field_type")
        if field_type is None or not field_type.name:
            msg = f"Solr field type '{self._values['id']}' has no base field type"
            raise MissingFieldTypeError(msg)
        return SolrFieldType(**copy.deepcopy(self._values))
