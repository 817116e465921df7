"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings

from headerprop.core.exceptions import ConfigurationError

LEGACY_MARKER_PATTERN = r"^[a-zA-Z]:\\[a-zA-Z]+\\[0-9]+_[0-9]+-[0-9]+ [a-zA-Z]+\.txt$"


class HeaderConfig(BaseSettings):
    """Header detection configuration.

    ``patterns`` is an ordered name -> regex mapping; its insertion order is the
    scan order. Set it from the environment as a JSON object.
    """

    model_config = {"env_prefix": "HEADERPROP_HEADER_"}

    patterns: dict[str, str] = {}
    legacy_marker_pattern: str = LEGACY_MARKER_PATTERN
    encoding: str = "utf-8"
    read_chunk_size: int = 64 * 1024

    @field_validator("patterns")
    @classmethod
    def _patterns_compile(cls, value: dict[str, str]) -> dict[str, str]:
        for name, pattern in value.items():
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Header pattern {name!r} is not a valid regex: {exc}") from exc
        return value

    def compiled_patterns(self) -> list[re.Pattern[str]]:
        """Return the compiled pattern set in scan order."""
        if not self.patterns:
            raise ConfigurationError("No header patterns configured (HEADERPROP_HEADER_PATTERNS)")
        return [re.compile(p) for p in self.patterns.values()]


class StorageConfig(BaseSettings):
    """S3 object storage configuration. A container is a bucket."""

    model_config = {"env_prefix": "HEADERPROP_STORAGE_"}

    source_container: str = ""
    destination_container: str = ""
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override
    staging_prefix: str = ".staging/"

    def require_source(self) -> str:
        if not self.source_container:
            raise ConfigurationError(
                "Source container cannot be empty (HEADERPROP_STORAGE_SOURCE_CONTAINER)"
            )
        return self.source_container

    def require_destination(self) -> str:
        if not self.destination_container:
            raise ConfigurationError(
                "Destination container cannot be empty (HEADERPROP_STORAGE_DESTINATION_CONTAINER)"
            )
        return self.destination_container


class RedisConfig(BaseSettings):
    """Redis configuration for the header cache and source leases."""

    model_config = {"env_prefix": "HEADERPROP_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    key_prefix: str = "headerprop:"


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "HEADERPROP_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    header: HeaderConfig = HeaderConfig()
    storage: StorageConfig = StorageConfig()
    redis: RedisConfig = RedisConfig()
