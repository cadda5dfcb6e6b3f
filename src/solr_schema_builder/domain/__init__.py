"""Domain layer - the Solr field type aggregate with no I/O dependencies."""

from solr_schema_builder.domain.field_type import SolrFieldType, SolrFieldTypeBuilder


__all__ = [
    "SolrFieldType",
    "SolrFieldTypeBuilder",
]
