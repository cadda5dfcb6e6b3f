"""Centralized configuration for solr-schema-builder using Pydantic Settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from solr_schema_builder.naming import DEFAULT_DOMAIN


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``SOLR_SCHEMA_*`` environment variables.

    CLI flags take precedence over these values.
    """

    model_config = SettingsConfigDict(
        env_prefix="SOLR_SCHEMA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    config_dir: str = Field(default="config", description="Directory holding field type YAML exports")
    output_dir: str = Field(default="solr_conf", description="Directory the config set files are written to")
    solr_major_version: int = Field(default=9, ge=3, le=20, description="Targeted Solr major version")
    domain: str = Field(default=DEFAULT_DOMAIN, min_length=1, description="Content domain to select field types for")

    # Output settings
    pretty_json: bool = Field(default=False, description="Indent JSON output by two spaces")
    add_xml_comments: bool = Field(default=True, description="Prefix XML fragments with a label comment")

    # Logging settings
    log_level: str = Field(default="info", description="Logging level")
    json_logs: bool = Field(default=False, description="Emit structured JSON logs")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        if value.lower() not in {"debug", "info", "warning", "error", "critical"}:
            raise ValueError(f"Unknown log level: {value}")
        return value.lower()

    def get_log_level(self) -> str:
        """Log level name as understood by :mod:`logging`."""
        return self.log_level.upper()

    def is_json_logging(self) -> bool:
        return self.json_logs
