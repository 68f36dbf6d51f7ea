"""Application configuration using Pydantic Settings."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from solrbridge.core.models import DEFAULT_SERVER_URL, ConnectionConfig
from solrbridge.core.types import LivenessMode


class SolrSettings(BaseSettings):
    """Connector configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="SOLRBRIDGE_",
    )

    # Server
    server_url: str = Field(
        default=DEFAULT_SERVER_URL,
        description="Solr base URL; include the core to use a non-default one",
    )
    username: str | None = Field(
        default=None,
        description="Basic auth username (empty names are not allowed)",
    )
    password: str | None = Field(
        default=None,
        description="Basic auth password (empty passwords are not allowed)",
    )
    strict_credentials: bool = Field(
        default=False,
        description="Reject a username without a password (or vice versa) instead of ignoring both",
    )

    # Transport
    timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="HTTP timeout in seconds",
    )

    # Validation
    liveness_mode: LivenessMode = Field(
        default=LivenessMode.ANY_RESPONSE,
        description="How a ping response is judged when validating the session",
    )

    # App settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    def connection_config(self) -> ConnectionConfig:
        """Build the connection config for these settings."""
        return ConnectionConfig(
            server_address=self.server_url,
            username=self.username,
            password=self.password,
        )


@lru_cache
def get_settings() -> SolrSettings:
    """Get cached settings instance."""
    return SolrSettings()


def configure_logging(settings: SolrSettings | None = None) -> None:
    """Apply the configured log level to the package logger."""
    settings = settings or get_settings()
    level = "DEBUG" if settings.debug else settings.log_level.upper()
    logging.getLogger("solrbridge").setLevel(level)
