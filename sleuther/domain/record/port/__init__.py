from .sink import RegistrySink
from .source import RecordSource

__all__ = ["RecordSource", "RegistrySink"]
