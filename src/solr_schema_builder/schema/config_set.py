"""Assembly of Solr config set files from field type entities.

Produces the include files a Solr config set pulls into ``schema.xml`` and
``solrconfig.xml``:

- ``schema_extra_types.xml``: every ``<fieldType>`` (base + variants)
- ``schema_extra_fields.xml``: every ``<dynamicField>`` declaration
- ``solrconfig_extra.xml``: solrconfig snippets such as search components
- one text file per stopword/synonym/protword list
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
import logging
from pathlib import Path
import re

from solr_schema_builder.domain.field_type import SolrFieldType
from solr_schema_builder.naming import DEFAULT_DOMAIN
from solr_schema_builder.observability.context import generation_context
from solr_schema_builder.schema.xml_builder import build_xml


logger = logging.getLogger(__name__)

SCHEMA_EXTRA_TYPES_FILE = "schema_extra_types.xml"
SCHEMA_EXTRA_FIELDS_FILE = "schema_extra_fields.xml"
SOLRCONFIG_EXTRA_FILE = "solrconfig_extra.xml"

_VERSION_PART = re.compile(r"\d+")


def version_key(version: str) -> tuple[int, ...]:
    """Turn ``"7.0.0"`` into ``(7, 0, 0)`` for ordering."""
    return tuple(int(part) for part in _VERSION_PART.findall(version))


def major_version(version: str) -> int:
    key = version_key(version)
    return key[0] if key else 0


def select_field_types(
    field_types: Iterable[SolrFieldType],
    solr_major_version: int,
    domain: str = DEFAULT_DOMAIN,
) -> list[SolrFieldType]:
    """Pick one entity per (language, custom code) for the target Solr version.

    Entities requiring a newer Solr are skipped. Among the rest, a match for
    the requested domain beats a ``generic`` one, then the highest minimum
    version wins. Result is ordered by field type name.
    """
    selection: dict[tuple[str, str], SolrFieldType] = {}
    for solr_field_type in field_types:
        if major_version(solr_field_type.minimum_solr_version) > solr_major_version:
            continue
        domains = solr_field_type.get_domains()
        if domain not in domains and DEFAULT_DOMAIN not in domains:
            continue

        group = (solr_field_type.field_type_language_code, solr_field_type.custom_code or "")
        current = selection.get(group)
        if current is None or _is_preferred(solr_field_type, current, domain):
            selection[group] = solr_field_type

    return sorted(selection.values(), key=lambda selected: (selected.get_field_type_name(), selected.id))


def _is_preferred(candidate: SolrFieldType, current: SolrFieldType, domain: str) -> bool:
    candidate_specific = domain != DEFAULT_DOMAIN and domain in candidate.get_domains()
    current_specific = domain != DEFAULT_DOMAIN and domain in current.get_domains()
    if candidate_specific != current_specific:
        return candidate_specific
    return version_key(candidate.minimum_solr_version) > version_key(current.minimum_solr_version)


def build_schema_extra_types_xml(field_types: Iterable[SolrFieldType], add_comment: bool = True) -> str:
    parts: list[str] = []
    for solr_field_type in field_types:
        parts.append(solr_field_type.get_as_xml(add_comment))
        parts.append(solr_field_type.get_spellcheck_field_type_as_xml(add_comment))
        parts.append(solr_field_type.get_collated_field_type_as_xml(add_comment))
        parts.append(solr_field_type.get_unstemmed_field_type_as_xml(add_comment))
    return "".join(parts)


def build_schema_extra_fields_xml(
    field_types: Iterable[SolrFieldType],
    solr_major_version: int | None = None,
) -> str:
    """Render ``<dynamicField/>`` declarations; the first pattern wins on duplicates."""
    seen: set[str] = set()
    parts: list[str] = []
    for solr_field_type in field_types:
        for dynamic_field in solr_field_type.get_dynamic_fields(solr_major_version):
            if dynamic_field.name in seen:
                logger.debug("Skipping duplicate dynamic field %s from %s", dynamic_field.name, solr_field_type.id)
                continue
            seen.add(dynamic_field.name)
            parts.append(build_xml("dynamicField", dynamic_field.to_dict()))
    return "".join(parts)


def build_solrconfig_extra_xml(field_types: Iterable[SolrFieldType], add_comment: bool = True) -> str:
    return "".join(solr_field_type.get_solr_configs_as_xml(add_comment) for solr_field_type in field_types)


def collect_text_files(field_types: Iterable[SolrFieldType]) -> dict[str, str]:
    files: dict[str, str] = {}
    for solr_field_type in field_types:
        files.update(solr_field_type.get_text_file_names())
    return files


def requires_managed_schema(field_types: Iterable[SolrFieldType]) -> bool:
    return any(solr_field_type.requires_managed_schema() for solr_field_type in field_types)


@dataclass
class ConfigSet:
    """Generated config set include files."""

    solr_major_version: int
    field_type_ids: list[str]
    schema_extra_types: str
    schema_extra_fields: str
    solrconfig_extra: str
    text_files: dict[str, str] = field(default_factory=dict)
    managed_schema: bool = False

    def files(self) -> dict[str, str]:
        """Map file names to contents."""
        files = {
            SCHEMA_EXTRA_TYPES_FILE: self.schema_extra_types,
            SCHEMA_EXTRA_FIELDS_FILE: self.schema_extra_fields,
            SOLRCONFIG_EXTRA_FILE: self.solrconfig_extra,
        }
        files.update(self.text_files)
        return files

    def write_to(self, output_dir: Path) -> list[Path]:
        """Write all files into ``output_dir`` and return their paths."""
        output_dir.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for name, content in self.files().items():
            path = output_dir / name
            path.write_text(content, encoding="utf-8")
            written.append(path)
        logger.info(
            "Wrote %d config set files to %s",
            len(written),
            output_dir,
            extra={"output_dir": output_dir, "file_names": [path.name for path in written]},
        )
        return written


def build_config_set(
    field_types: Sequence[SolrFieldType],
    solr_major_version: int,
    domain: str = DEFAULT_DOMAIN,
    add_comment: bool = True,
) -> ConfigSet:
    """Select field types for the target Solr version and render all files."""
    with generation_context(solr_version=solr_major_version, domain=domain):
        selected = select_field_types(field_types, solr_major_version, domain)
        logger.info(
            "Selected %d of %d field types for Solr %d (%s)",
            len(selected),
            len(field_types),
            solr_major_version,
            domain,
        )
        return ConfigSet(
            solr_major_version=solr_major_version,
            field_type_ids=[solr_field_type.id for solr_field_type in selected],
            schema_extra_types=build_schema_extra_types_xml(selected, add_comment),
            schema_extra_fields=build_schema_extra_fields_xml(selected, solr_major_version),
            solrconfig_extra=build_solrconfig_extra_xml(selected, add_comment),
            text_files=collect_text_files(selected),
            managed_schema=requires_managed_schema(selected),
        )
