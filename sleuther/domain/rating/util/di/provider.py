from dishka import provide

from sleuther.config import Config
from sleuther.domain.rating.model.tables import DEFAULT_TABLES, RatingTables
from sleuther.domain.rating.service.rating import RatingEngine
from sleuther.util.di.base import Provider
from sleuther.util.di.scope import Scope


class RatingProvider(Provider):
    @provide(scope=Scope.APP)
    def get_rating_tables(self, config: Config) -> RatingTables:
        """Built-in tables plus configured additions, frozen at startup."""
        return DEFAULT_TABLES.extended(
            licenses=config.rating.extra_licenses,
            formats=config.rating.extra_formats,
        )

    rating_engine = provide(RatingEngine, scope=Scope.APP)
