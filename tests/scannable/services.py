from __future__ import annotations

from injectree.key import Named
from injectree.markers import injectable
from injectree.scope import SingletonScope
from tests.scannable.repositories import SqlRepository


@injectable(scope=SingletonScope)
class Clock:
    pass


class FrozenClock(Clock):
    """Inherits the marker but is not decorated itself."""


@injectable
class Greeter:
    def __init__(self, clock: Clock, greeting: str = "hello") -> None:
        self.clock = clock
        self.greeting = greeting


@injectable(implemented_by=SqlRepository)
class Repository:
    pass


def make_settings() -> Settings:
    return Settings("from-provider")


@injectable(qualifier=Named("default"), provided_by=make_settings)
class Settings:
    def __init__(self, source: str) -> None:
        self.source = source
