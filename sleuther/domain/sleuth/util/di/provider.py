from dishka import provide

from sleuther.config import Config
from sleuther.domain.linkcheck.service.checker import LinkChecker
from sleuther.domain.rating.service.rating import RatingEngine
from sleuther.domain.record.port.sink import RegistrySink
from sleuther.domain.record.port.source import RecordSource
from sleuther.domain.sleuth.service.orchestrator import Sleuther
from sleuther.domain.sleuth.service.writer import AspectWriter
from sleuther.util.di.base import Provider
from sleuther.util.di.scope import Scope


class SleuthProvider(Provider):
    @provide(scope=Scope.UOW)
    def get_aspect_writer(
        self, sink: RegistrySink, source: RecordSource, config: Config
    ) -> AspectWriter:
        cfg = config.writer
        return AspectWriter(
            sink=sink,
            source=source,
            max_attempts=cfg.max_attempts,
            backoff_base=cfg.backoff_base,
            backoff_factor=cfg.backoff_factor,
        )

    @provide(scope=Scope.UOW)
    def get_sleuther(
        self,
        link_checker: LinkChecker,
        rating_engine: RatingEngine,
        writer: AspectWriter,
        config: Config,
    ) -> Sleuther:
        return Sleuther(
            link_checker=link_checker,
            rating_engine=rating_engine,
            writer=writer,
            max_concurrent_records=config.worker.max_concurrent_records,
        )
