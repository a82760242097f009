from __future__ import annotations

import pytest
from pydantic_settings import BaseSettings, SettingsConfigDict

from injectree.bindings import ProviderBinding
from injectree.exceptions import InjectreeConfigurationError
from injectree.injector import Injector
from injectree.integrations.pydantic_settings import SettingsModule, is_pydantic_settings_subclass
from injectree.key import make_key
from injectree.module import BasicModule
from injectree.scope import SingletonScope


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="INJECTREE_TEST_DB_")

    url: str = "sqlite://"
    pool_size: int = 5


class CacheSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="INJECTREE_TEST_CACHE_")

    ttl: int = 60


class Repository:
    def __init__(self, settings: DatabaseSettings) -> None:
        self.settings = settings


class RepositoryModule(BasicModule):
    def configure(self) -> None:
        self.bind(Repository)


def test_is_pydantic_settings_subclass() -> None:
    assert is_pydantic_settings_subclass(DatabaseSettings)
    assert not is_pydantic_settings_subclass(DatabaseSettings())
    assert not is_pydantic_settings_subclass(Repository)


def test_settings_are_bound_as_singletons() -> None:
    module = SettingsModule(DatabaseSettings, CacheSettings)

    assert [binding.key for binding in module.bindings] == [make_key(DatabaseSettings), make_key(CacheSettings)]
    assert all(isinstance(binding, ProviderBinding) for binding in module.bindings)
    assert all(binding.scope is SingletonScope for binding in module.bindings)
    assert module.scopes == ()


def test_settings_values_come_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INJECTREE_TEST_DB_URL", "postgresql://db")
    monkeypatch.setenv("INJECTREE_TEST_DB_POOL_SIZE", "20")
    injector = Injector([SettingsModule(DatabaseSettings), RepositoryModule()])

    repository = injector.get_instance_of(Repository)

    assert repository.settings.url == "postgresql://db"
    assert repository.settings.pool_size == 20
    assert repository.settings is injector.get_instance_of(DatabaseSettings)


def test_defaults_apply_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("INJECTREE_TEST_CACHE_TTL", raising=False)
    injector = Injector([SettingsModule(CacheSettings)])

    assert injector.get_instance_of(CacheSettings).ttl == 60


def test_rejects_non_settings_types() -> None:
    with pytest.raises(InjectreeConfigurationError, match="not a pydantic_settings.BaseSettings subclass"):
        SettingsModule(Repository)
