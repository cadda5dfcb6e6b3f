"""CLI for generating Solr config set files from field type exports."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys

from solr_schema_builder.adapters.yaml_repository import YamlFieldTypeRepository
from solr_schema_builder.config import Settings
from solr_schema_builder.domain.field_type import SolrFieldType
from solr_schema_builder.errors import SolrSchemaError
from solr_schema_builder.observability import configure_logging, generation_context
from solr_schema_builder.schema.config_set import build_config_set, build_schema_extra_types_xml, select_field_types


logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("files", "json", "xml")


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="solr-schema-builder",
        description="Generate Solr schema and solrconfig include files from field type configs",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        help="Directory holding search_api_solr.solr_field_type.*.yml files (default: SOLR_SCHEMA_CONFIG_DIR)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory the config set files are written to (default: SOLR_SCHEMA_OUTPUT_DIR)",
    )
    parser.add_argument(
        "--solr-version",
        type=int,
        help="Targeted Solr major version (default: SOLR_SCHEMA_SOLR_MAJOR_VERSION)",
    )
    parser.add_argument(
        "--domain",
        help="Content domain; generic field types fill the gaps (default: SOLR_SCHEMA_DOMAIN)",
    )
    parser.add_argument(
        "--field-type",
        metavar="ID",
        help="Only process the field type config with this id",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="files",
        help="Write the config set (files) or print field types as json or xml",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent JSON output",
    )
    return parser


def _validate_args(args: argparse.Namespace) -> None:
    if args.solr_version is not None and not 3 <= args.solr_version <= 20:
        raise ValueError("--solr-version must be between 3 and 20")


def _load_field_types(repository: YamlFieldTypeRepository, field_type_id: str | None) -> list[SolrFieldType]:
    if field_type_id is None:
        return repository.list()
    solr_field_type = repository.get(field_type_id)
    if solr_field_type is None:
        raise SolrSchemaError(f"Field type config '{field_type_id}' not found in {repository.config_dir}")
    return [solr_field_type]


def _print_json(field_types: Sequence[SolrFieldType], pretty: bool) -> None:
    for solr_field_type in field_types:
        sys.stdout.write(solr_field_type.get_field_type_as_json(pretty=pretty) + "\n")


def _run(args: argparse.Namespace, settings: Settings) -> int:
    config_dir = args.config_dir or Path(settings.config_dir)
    solr_major_version = args.solr_version or settings.solr_major_version
    domain = args.domain or settings.domain
    pretty = args.pretty or settings.pretty_json

    repository = YamlFieldTypeRepository(config_dir)
    field_types = _load_field_types(repository, args.field_type)
    if not field_types:
        logger.warning("No field type configs found in %s", config_dir)
        return 1

    if args.format == "files":
        config_set = build_config_set(field_types, solr_major_version, domain, settings.add_xml_comments)
        if config_set.managed_schema:
            logger.warning("Selected field types use managed resources; the core needs a managed schema")
        config_set.write_to(args.output_dir or Path(settings.output_dir))
        return 0

    # A single requested field type is printed even if it targets another version.
    selected = field_types if args.field_type else select_field_types(field_types, solr_major_version, domain)
    if args.format == "json":
        _print_json(selected, pretty)
    else:
        sys.stdout.write(build_schema_extra_types_xml(selected, settings.add_xml_comments))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings()
        _validate_args(args)
    except ValueError as exc:
        configure_logging()
        logger.error("Invalid configuration: %s", exc)
        return 1

    configure_logging(settings.get_log_level(), settings.is_json_logging())

    with generation_context(field_type=args.field_type):
        try:
            return _run(args, settings)
        except FileNotFoundError as exc:
            logger.error("Field type config not found: %s", exc)
            return 1
        except SolrSchemaError as exc:
            logger.error("%s", exc)
            return 1
        except OSError as exc:
            logger.error("Failed to write config set: %s", exc)
            return 1


if __name__ == "__main__":
    sys.exit(main())
