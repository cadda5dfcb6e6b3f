"""Shared test fixtures and configuration."""

import logging
import os
from pathlib import Path

import pytest

from solr_schema_builder.domain.field_type import SolrFieldType, SolrFieldTypeBuilder
from solr_schema_builder.observability.context import generation_context_var


FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
FIELD_TYPES_DIR = FIXTURES_DIR / "field_types"

ENV_PREFIX = "SOLR_SCHEMA_"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop SOLR_SCHEMA_* variables so Settings always starts from defaults."""
    for key in list(os.environ):
        if key.upper().startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def isolated_logging():
    """Restore root logger handlers and level after configure_logging calls."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def reset_generation_context():
    token = generation_context_var.set(None)
    yield
    generation_context_var.reset(token)


@pytest.fixture
def field_types_dir() -> Path:
    return FIELD_TYPES_DIR


@pytest.fixture
def text_und_definition() -> dict:
    """Base field type with index and query stages."""
    return {
        "name": "text_und",
        "class": "solr.TextField",
        "positionIncrementGap": 100,
        "analyzers": [
            {
                "type": "index",
                "tokenizer": {"class": "solr.WhitespaceTokenizerFactory"},
                "filters": [
                    {"class": "solr.WordDelimiterGraphFilterFactory", "catenateWords": 1},
                    {"class": "solr.LowerCaseFilterFactory"},
                    {"class": "solr.FlattenGraphFilterFactory"},
                ],
            },
            {
                "type": "query",
                "tokenizer": {"class": "solr.WhitespaceTokenizerFactory"},
                "filters": [
                    {"class": "solr.WordDelimiterGraphFilterFactory", "catenateWords": 0},
                    {"class": "solr.LowerCaseFilterFactory"},
                ],
            },
        ],
    }


@pytest.fixture
def base_only_field_type(text_und_definition) -> SolrFieldType:
    return (
        SolrFieldTypeBuilder("text_und_7_0_0")
        .with_label("Fulltext")
        .with_minimum_solr_version("7.0.0")
        .with_field_type(text_und_definition)
        .build()
    )


@pytest.fixture
def full_field_type(text_und_definition) -> SolrFieldType:
    """German field type with every variant, a solrconfig snippet and text files."""
    definition = dict(text_und_definition, name="text_de")
    return (
        SolrFieldTypeBuilder("text_de_7_0_0")
        .with_label("German Text Field")
        .with_minimum_solr_version("7.0.0")
        .with_language_code("de")
        .with_domains(["generic"])
        .with_field_type(definition)
        .with_unstemmed_field_type(dict(text_und_definition, name="text_unstemmed_de"))
        .with_spellcheck_field_type(
            {
                "name": "text_spell_de",
                "class": "solr.TextField",
                "analyzers": [{"tokenizer": {"class": "solr.StandardTokenizerFactory"}}],
            }
        )
        .with_collated_field_type(
            {"name": "collated_de", "class": "solr.ICUCollationField", "locale": "de", "strength": "primary"}
        )
        .with_solr_configs(
            {
                "searchComponents": [
                    {
                        "name": "suggest",
                        "class": "solr.SuggestComponent",
                        "lst": [{"name": "suggester", "str": [{"name": "name", "VALUE": "de"}]}],
                    }
                ]
            }
        )
        .with_text_file("stopwords", "aber\nalle\n")
        .with_text_file("protwords", "")
        .build()
    )
