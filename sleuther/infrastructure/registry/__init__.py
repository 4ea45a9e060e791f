from .client import HttpRegistryClient
from .memory import InMemoryRegistry

__all__ = ["HttpRegistryClient", "InMemoryRegistry"]
