"""Custom Dishka scopes for the sleuther."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Sleuther dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Application lifetime (HTTP clients, rate-limit gate, link checker)
    - UOW: Unit of Work (one batch run or one record delivery)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
