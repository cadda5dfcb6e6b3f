"""Adapters layer - Repository implementations.

Loads and stores Solr field type configuration exports.
"""

from .yaml_repository import (
    AbstractFieldTypeRepository,
    FakeFieldTypeRepository,
    YamlFieldTypeRepository,
)


__all__ = [
    "AbstractFieldTypeRepository",
    "FakeFieldTypeRepository",
    "YamlFieldTypeRepository",
]
