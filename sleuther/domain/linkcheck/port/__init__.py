from .prober import Prober

__all__ = ["Prober"]
