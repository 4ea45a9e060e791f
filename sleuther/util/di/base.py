from dishka import Provider as DishkaProvider

from sleuther.util.di.scope import Scope


class Provider(DishkaProvider):
    """Base for all sleuther DI providers. Dependencies default to APP scope."""

    scope = Scope.APP
