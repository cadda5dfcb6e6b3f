"""Observability module for structured logging and run correlation."""

from solr_schema_builder.observability.context import (
    generation_context,
    generation_context_var,
    get_generation_context,
    set_generation_context,
)
from solr_schema_builder.observability.logging import JsonFormatter, configure_logging


__all__ = [
    "JsonFormatter",
    "configure_logging",
    "generation_context",
    "generation_context_var",
    "get_generation_context",
    "set_generation_context",
]
