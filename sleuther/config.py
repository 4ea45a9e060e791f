import logging
import os
import sys
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


# =============================================================================
# Registry Configuration
# =============================================================================


class RegistryConfig(BaseModel):
    """Registry API configuration (nested in Config, uses env_nested_delimiter)."""

    base_url: str = "http://localhost:6101/v0"
    page_size: int = Field(default=100, ge=1)  # Records per page when crawling
    timeout: float = Field(default=30.0, gt=0)
    token: str | None = None  # Sent as a bearer token when set
    tenant_id: str | None = None  # Sent as X-Magda-Tenant-Id when set


# =============================================================================
# Sleuthing Configuration
# =============================================================================


class LinkCheckConfig(BaseModel):
    """Link checker configuration.

    ``rate_limit_cooldown`` is the minimum time a rate-limited key stays
    parked. ``rate_limit_scope`` picks whether the key is the URL's host or one
    global key shared by every URL.
    """

    max_attempts: int = Field(default=3, ge=1)  # Probes charged to the retry budget
    backoff_base: float = Field(default=1.0, ge=0)  # Seconds before the first retry
    backoff_factor: float = Field(default=2.0, ge=1)
    backoff_max: float = Field(default=30.0, ge=0)
    backoff_jitter: float = Field(default=0.5, ge=0)  # Uniform extra delay, seconds
    timeout: float = Field(default=10.0, gt=0)  # Per-probe timeout
    max_concurrency: int = Field(default=20, ge=1)  # Global in-flight probe ceiling
    rate_limit_cooldown: float = Field(default=60.0, ge=0)
    rate_limit_scope: Literal["host", "global"] = "host"
    max_cooldown: float = Field(default=600.0, ge=0)  # Cap for Retry-After
    max_deferrals: int | None = Field(default=10, ge=0)  # None = re-probe forever
    user_agent: str = "dataset-sleuther/0.1 (+link-health)"


class RatingConfig(BaseModel):
    """Additions to the built-in open-license and open-format tables."""

    extra_licenses: list[str] = []
    extra_formats: dict[int, list[str]] = {}  # star level (2-4) -> format names

    @field_validator("extra_formats")
    @classmethod
    def _known_levels(cls, value: dict[int, list[str]]) -> dict[int, list[str]]:
        unknown = sorted(set(value) - {2, 3, 4})
        if unknown:
            raise ValueError(f"format star levels must be 2, 3 or 4, got {unknown}")
        return value


class WriterConfig(BaseModel):
    """Aspect write-back retry configuration."""

    max_attempts: int = Field(default=3, ge=1)
    backoff_base: float = Field(default=0.5, ge=0)
    backoff_factor: float = Field(default=2.0, ge=1)


class WorkerConfig(BaseModel):
    """Record-level concurrency for batch runs."""

    max_concurrent_records: int = Field(default=10, ge=1)


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by SLEUTHER_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load config from YAML file if specified."""
        config_file = os.environ.get("SLEUTHER_CONFIG_FILE")
        if config_file:
            path = Path(config_file).expanduser()
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from SLEUTHER_LOG_FILE env var."""
        return os.environ.get("SLEUTHER_LOG_FILE")


class Config(BaseSettings):
    registry: RegistryConfig = RegistryConfig()
    link_check: LinkCheckConfig = LinkCheckConfig()
    rating: RatingConfig = RatingConfig()
    writer: WriterConfig = WriterConfig()
    worker: WorkerConfig = WorkerConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = {
        "env_prefix": "SLEUTHER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows SLEUTHER_LINK_CHECK__MAX_ATTEMPTS override
        "extra": "ignore",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - SLEUTHER_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup so every module logger
    picks up the configuration.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
