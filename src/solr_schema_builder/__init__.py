"""Generate Solr schema and solrconfig fragments for language-specific field types."""

from solr_schema_builder.domain.field_type import SolrFieldType, SolrFieldTypeBuilder
from solr_schema_builder.errors import (
    FieldTypeConfigError,
    FieldTypeDecodeError,
    MissingFieldTypeError,
    SolrSchemaError,
)


__version__ = "0.1.0"

__all__ = [
    "FieldTypeConfigError",
    "FieldTypeDecodeError",
    "MissingFieldTypeError",
    "SolrFieldType",
    "SolrFieldTypeBuilder",
    "SolrSchemaError",
    "__version__",
]
