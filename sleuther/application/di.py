from dishka import AsyncContainer, Provider, from_context, make_async_container

from sleuther.config import Config
from sleuther.domain.rating.util.di import RatingProvider
from sleuther.domain.sleuth.util.di import SleuthProvider
from sleuther.infrastructure.probe.di import ProbeProvider
from sleuther.infrastructure.registry.di import RegistryProvider
from sleuther.util.di.scope import Scope


class ConfigProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)


def create_container(config: Config | None = None, *providers: Provider) -> AsyncContainer:
    """Build the application container.

    Extra ``providers`` are registered last, so they override earlier ones
    (e.g. an in-memory registry in place of the HTTP one for offline runs).
    """
    config = config or Config()

    return make_async_container(
        ConfigProvider(),
        ProbeProvider(),
        RatingProvider(),
        RegistryProvider(),
        SleuthProvider(),
        *providers,
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
