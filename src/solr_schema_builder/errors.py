"""Exceptions raised while building Solr schema artifacts."""

from __future__ import annotations


class SolrSchemaError(Exception):
    """Base error for schema generation."""


class FieldTypeDecodeError(SolrSchemaError, ValueError):
    """Raised when JSON text or a field type structure cannot be decoded."""


class MissingFieldTypeError(SolrSchemaError, LookupError):
    """Raised when the base field type is read before it was set."""


class FieldTypeConfigError(SolrSchemaError):
    """Raised when a field type configuration file cannot be loaded."""
