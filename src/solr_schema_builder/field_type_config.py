"""Configuration export model for Solr field types using Pydantic.

One YAML file describes one field type, named
``search_api_solr.solr_field_type.<id>.yml``::

    id: text_de_7_0_0
    label: German Text Field
    minimum_solr_version: 7.0.0
    custom_code: ''
    field_type_language_code: de
    domains: {}
    field_type:
      name: text_de
      class: solr.TextField
      analyzers:
        - type: index
          tokenizer: {class: solr.WhitespaceTokenizerFactory}
          filters: [...]
    spellcheck_field_type: {...}
    collated_field_type: {...}
    solr_configs: {}
    text_files:
      stopwords: |
        aber
        ...

Keys that only matter to the exporting system (``uuid``, ``langcode``,
``status``, ``dependencies``) are ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, Field, ValidationError, field_validator
import yaml

from solr_schema_builder.domain.field_type import SolrFieldType
from solr_schema_builder.errors import FieldTypeConfigError, FieldTypeDecodeError, MissingFieldTypeError
from solr_schema_builder.naming import LANGCODE_NOT_SPECIFIED
from solr_schema_builder.schema.analyzers import FieldTypeDefinition


class SolrFieldTypeConfig(BaseModel):
    """Validated configuration export of a single Solr field type."""

    model_config = {"extra": "ignore"}

    id: Annotated[
        str,
        Field(min_length=1, description="Machine name, e.g. text_de_7_0_0", examples=["text_de_7_0_0"]),
    ]
    label: Annotated[str, Field(description="Human readable label used in XML comments")] = ""
    minimum_solr_version: Annotated[
        str,
        Field(
            pattern=r"^\d+(\.\d+)*$",
            description="Lowest Solr version this field type works with",
            examples=["7.0.0"],
        ),
    ] = "0.0.0"
    custom_code: Annotated[
        str | None,
        Field(description="Optional discriminator such as a language family code"),
    ] = None
    field_type_language_code: Annotated[
        str,
        Field(min_length=1, description="Targeted language code or 'und' for not specified"),
    ] = LANGCODE_NOT_SPECIFIED
    domains: list[str] = Field(default_factory=list, description="Targeted content domains")
    field_type: Annotated[dict[str, Any], Field(description="Base field type definition")]
    unstemmed_field_type: dict[str, Any] | None = None
    spellcheck_field_type: dict[str, Any] | None = None
    collated_field_type: dict[str, Any] | None = None
    solr_configs: dict[str, Any] = Field(default_factory=dict)
    text_files: dict[str, str] = Field(default_factory=dict)

    @field_validator("minimum_solr_version", mode="before")
    @classmethod
    def _stringify_version(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("custom_code", mode="before")
    @classmethod
    def _empty_custom_code(cls, value: object) -> object:
        return value or None

    @field_validator("unstemmed_field_type", "spellcheck_field_type", "collated_field_type", mode="before")
    @classmethod
    def _empty_variant(cls, value: object) -> object:
        return value or None

    @field_validator("domains", mode="before")
    @classmethod
    def _normalize_domains(cls, value: object) -> object:
        # Exports write an empty sequence as {}.
        if not value:
            return []
        if isinstance(value, dict):
            return list(value.values())
        return value

    @field_validator("solr_configs", mode="before")
    @classmethod
    def _empty_solr_configs(cls, value: object) -> object:
        return value or {}

    @field_validator("text_files", mode="before")
    @classmethod
    def _normalize_text_files(cls, value: object) -> object:
        if not value:
            return {}
        if isinstance(value, dict):
            return {name: "" if content is None else content for name, content in value.items()}
        return value

    def to_entity(self) -> SolrFieldType:
        """Build the domain entity.

        Raises:
            FieldTypeConfigError: If a field type definition is malformed
        """
        try:
            return SolrFieldType(
                id=self.id,
                label=self.label,
                minimum_solr_version=self.minimum_solr_version,
                custom_code=self.custom_code,
                field_type_language_code=self.field_type_language_code,
                domains=list(self.domains),
                field_type=FieldTypeDefinition.from_dict(self.field_type),
                spellcheck_field_type=_optional_definition(self.spellcheck_field_type),
                unstemmed_field_type=_optional_definition(self.unstemmed_field_type),
                collated_field_type=_optional_definition(self.collated_field_type),
                solr_configs=dict(self.solr_configs),
                text_files=dict(self.text_files),
            )
        except FieldTypeDecodeError as exc:
            msg = f"Invalid field type definition in '{self.id}': {exc}"
            raise FieldTypeConfigError(msg) from exc

    @classmethod
    def from_entity(cls, entity: SolrFieldType) -> SolrFieldTypeConfig:
        """Create the export model of an entity.

        Raises:
            MissingFieldTypeError: If the entity has no base field type
        """
        field_type = entity.get_field_type()
        if field_type is None:
            raise MissingFieldTypeError(f"Solr field type '{entity.id}' has no base field type")
        return cls(
            id=entity.id,
            label=entity.label,
            minimum_solr_version=entity.minimum_solr_version,
            custom_code=entity.custom_code,
            field_type_language_code=entity.field_type_language_code,
            domains=entity.domains,
            field_type=field_type.to_dict(),
            unstemmed_field_type=_optional_dict(entity.unstemmed_field_type),
            spellcheck_field_type=_optional_dict(entity.spellcheck_field_type),
            collated_field_type=_optional_dict(entity.collated_field_type),
            solr_configs=entity.solr_configs,
            text_files=entity.text_files,
        )

    @classmethod
    def from_yaml_file(cls, path: Path) -> SolrFieldTypeConfig:
        """Load configuration from a YAML export.

        Raises:
            FileNotFoundError: If the file doesn't exist
            FieldTypeConfigError: If the file is not valid YAML or fails validation
        """
        if not path.exists():
            raise FileNotFoundError(f"Field type config not found: {path}")

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            msg = f"Failed to parse field type config {path}: {exc}"
            raise FieldTypeConfigError(msg) from exc

        if not isinstance(data, dict):
            raise FieldTypeConfigError(f"Field type config {path} must contain a mapping")

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            msg = f"Invalid field type config {path}: {exc}"
            raise FieldTypeConfigError(msg) from exc

    def to_yaml(self) -> str:
        """Serialize as a YAML export; unset variants are omitted."""
        return yaml.safe_dump(self.model_dump(exclude_none=True), sort_keys=False, allow_unicode=True)


def _optional_definition(data: dict[str, Any] | None) -> FieldTypeDefinition | None:
    return FieldTypeDefinition.from_dict(data) if data else None


def _optional_dict(definition: FieldTypeDefinition | None) -> dict[str, Any] | None:
    return definition.to_dict() if definition is not None else None
