"""Shared bootstrapping for CLI commands."""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import TypeVar

import logfire
from dishka import AsyncContainer, Provider
from pydantic import ValidationError as PydanticValidationError

from sleuther.application.di import create_container
from sleuther.cli.console import get_console
from sleuther.config import Config, configure_logging
from sleuther.domain.shared.error import ConfigurationError
from sleuther.util.di.scope import Scope

T = TypeVar("T")


def load_config() -> Config:
    """Load configuration from env, ``.env`` and the YAML file.

    Raises:
        ConfigurationError: If any setting is invalid.
    """
    try:
        return Config()
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(p) for p in first["loc"])
        raise ConfigurationError(
            f"Invalid configuration: {location}: {first['msg']} ({e.error_count()} error(s))"
        ) from e


def bootstrap() -> Config:
    """Load configuration and set up logging and tracing.

    Exits with status 1 when the configuration is invalid.
    """
    try:
        config = load_config()
    except ConfigurationError as e:
        get_console().error(e.message, hint="Check SLEUTHER_* variables and SLEUTHER_CONFIG_FILE")
        sys.exit(1)
    configure_logging(config.logging)
    # Spans are exported only when a Logfire token is present in the environment
    logfire.configure(send_to_logfire="if-token-present", console=False)
    logfire.instrument_httpx()
    return config


def run_in_container(
    config: Config,
    work: Callable[[AsyncContainer], Awaitable[T]],
    *providers: Provider,
) -> T:
    """Run ``work`` inside a UOW scope, closing every client afterwards."""

    async def _main() -> T:
        container = create_container(config, *providers)
        try:
            async with container(scope=Scope.UOW) as scope:
                return await work(scope)
        finally:
            await container.close()

    return asyncio.run(_main())
