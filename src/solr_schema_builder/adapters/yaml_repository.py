"""Filesystem repository for Solr field type configuration exports."""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from pathlib import Path

from solr_schema_builder.domain.field_type import SolrFieldType
from solr_schema_builder.field_type_config import SolrFieldTypeConfig


logger = logging.getLogger(__name__)

CONFIG_PREFIX = "search_api_solr.solr_field_type."
CONFIG_SUFFIXES = (".yml", ".yaml")


class AbstractFieldTypeRepository(ABC):
    """Abstract repository for the SolrFieldType aggregate."""

    @abstractmethod
    def list(self) -> list[SolrFieldType]:
        """Return all configured field types ordered by id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, field_type_id: str) -> SolrFieldType | None:
        """Get a field type by id."""
        raise NotImplementedError

    @abstractmethod
    def add(self, solr_field_type: SolrFieldType) -> None:
        """Store a field type, replacing any existing one with the same id."""
        raise NotImplementedError

    def ids(self) -> list[str]:
        return [solr_field_type.id for solr_field_type in self.list()]

    def count(self) -> int:
        return len(self.list())

    def available_domains(self) -> list[str]:
        return SolrFieldType.get_available_domains(self.list())

    def available_custom_codes(self) -> list[str]:
        return SolrFieldType.get_available_custom_codes(self.list())


class YamlFieldTypeRepository(AbstractFieldTypeRepository):
    """Field types stored as ``search_api_solr.solr_field_type.<id>.yml`` files.

    Files are re-read on every call; the directory is the source of truth.
    """

    def __init__(self, config_dir: Path | str) -> None:
        self.config_dir = Path(config_dir)

    def _config_paths(self) -> list[Path]:
        if not self.config_dir.is_dir():
            logger.warning("Field type config directory not found: %s", self.config_dir)
            return []
        return sorted(
            path
            for path in self.config_dir.iterdir()
            if path.is_file() and path.name.startswith(CONFIG_PREFIX) and path.suffix in CONFIG_SUFFIXES
        )

    def path_for(self, field_type_id: str) -> Path:
        return self.config_dir / f"{CONFIG_PREFIX}{field_type_id}.yml"

    def list(self) -> list[SolrFieldType]:
        field_types = [SolrFieldTypeConfig.from_yaml_file(path).to_entity() for path in self._config_paths()]
        field_types.sort(key=lambda solr_field_type: solr_field_type.id)
        logger.info("Loaded %d field type configs from %s", len(field_types), self.config_dir)
        return field_types

    def get(self, field_type_id: str) -> SolrFieldType | None:
        for suffix in CONFIG_SUFFIXES:
            path = self.config_dir / f"{CONFIG_PREFIX}{field_type_id}{suffix}"
            if path.is_file():
                return SolrFieldTypeConfig.from_yaml_file(path).to_entity()
        return None

    def add(self, solr_field_type: SolrFieldType) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(solr_field_type.id)
        path.write_text(SolrFieldTypeConfig.from_entity(solr_field_type).to_yaml(), encoding="utf-8")
        logger.info("Stored field type %s at %s", solr_field_type.id, path)


class FakeFieldTypeRepository(AbstractFieldTypeRepository):
    """In-memory repository for testing."""

    def __init__(self, field_types: list[SolrFieldType] | None = None):
        self._field_types: dict[str, SolrFieldType] = {}
        for solr_field_type in field_types or []:
            self.add(solr_field_type)

    def list(self) -> list[SolrFieldType]:
        return [self._field_types[field_type_id] for field_type_id in sorted(self._field_types)]

    def get(self, field_type_id: str) -> SolrFieldType | None:
        return self._field_types.get(field_type_id)

    def add(self, solr_field_type: SolrFieldType) -> None:
        self._field_types[solr_field_type.id] = solr_field_type
