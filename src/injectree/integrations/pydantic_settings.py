from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic_settings import BaseSettings

from injectree.bindings import AnyBinding, ProviderBinding
from injectree.exceptions import InjectreeConfigurationError
from injectree.key import make_key
from injectree.scope import Scope, SingletonScope


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether ``candidate`` is a ``pydantic_settings.BaseSettings`` subclass."""
    return isinstance(candidate, type) and issubclass(candidate, BaseSettings)


class SettingsModule:
    """Bind pydantic settings classes as singletons.

    Each class is built once, with no arguments, so its values come from the
    environment and dotenv sources configured on the class itself.

    Examples:
        .. code-block:: python

            class DatabaseSettings(BaseSettings):
                model_config = SettingsConfigDict(env_prefix="DB_")

                url: str = "sqlite://"


            injector = Injector([SettingsModule(DatabaseSettings), AppModule()])
            settings = injector.get_instance_of(DatabaseSettings)

    """

    def __init__(self, *settings_types: type[Any]) -> None:
        self._bindings: list[AnyBinding] = []
        for settings_type in settings_types:
            if not is_pydantic_settings_subclass(settings_type):
                msg = f"{settings_type!r} is not a pydantic_settings.BaseSettings subclass."
                raise InjectreeConfigurationError(msg)
            self._bindings.append(
                ProviderBinding(make_key(settings_type), settings_type, scope=SingletonScope),
            )

    @property
    def bindings(self) -> Sequence[AnyBinding]:
        return tuple(self._bindings)

    @property
    def scopes(self) -> Sequence[Scope]:
        return ()


__all__ = [
    "SettingsModule",
    "is_pydantic_settings_subclass",
]
