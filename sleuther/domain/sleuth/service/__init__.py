from .orchestrator import Sleuther
from .writer import AspectWriter

__all__ = ["AspectWriter", "Sleuther"]
