"""Tests for modules built by scanning Python modules for ``@injectable`` classes."""

from __future__ import annotations

import sys
import types

import pytest

from injectree.bindings import ConstructorBinding, ProviderBinding, Rebinding
from injectree.injector import Injector
from injectree.key import Named, make_key
from injectree.markers import INJECTABLE_ATTR, InjectableSpec, injectable
from injectree.scanner import ScannerModule
from injectree.scope import SingletonScope
from tests.scannable import repositories, services


class TestInjectableDecorator:
    def test_bare_decorator_records_default_metadata(self) -> None:
        assert services.Greeter.__dict__[INJECTABLE_ATTR] == InjectableSpec()

    def test_decorator_with_arguments_records_them(self) -> None:
        spec = services.Settings.__dict__[INJECTABLE_ATTR]

        assert spec.qualifier == Named("default")
        assert spec.provided_by is services.make_settings


class TestScannerModule:
    def test_collects_injectable_classes_defined_in_module(self) -> None:
        keys = {binding.key for binding in ScannerModule(services).bindings}

        assert keys == {
            make_key(services.Clock),
            make_key(services.Greeter),
            make_key(services.Repository),
            make_key(services.Settings, Named("default")),
        }

    def test_builds_binding_variant_from_marker(self) -> None:
        bindings = {binding.key: binding for binding in ScannerModule(services).bindings}

        assert isinstance(bindings[make_key(services.Greeter)], ConstructorBinding)
        assert bindings[make_key(services.Clock)].scope is SingletonScope
        assert isinstance(bindings[make_key(services.Repository)], Rebinding)
        assert isinstance(bindings[make_key(services.Settings, Named("default"))], ProviderBinding)

    def test_scans_modules_by_name(self) -> None:
        module = ScannerModule("tests.scannable.repositories")

        assert [binding.key for binding in module.bindings] == [make_key(repositories.SqlRepository)]
        assert module.scopes == ()

    def test_scans_package_recursively(self) -> None:
        keys = {binding.key for binding in ScannerModule("tests.scannable").bindings}

        assert make_key(repositories.SqlRepository) in keys
        assert make_key(services.Greeter) in keys

    def test_scanned_bindings_resolve(self) -> None:
        injector = Injector([ScannerModule(services, repositories)])

        greeter = injector.get_instance_of(services.Greeter)
        repository = injector.get_instance_of(services.Repository)

        assert greeter.clock is injector.get_instance_of(services.Clock)
        assert greeter.greeting == "hello"
        assert isinstance(repository, repositories.SqlRepository)
        assert repository is injector.get_instance_of(repositories.SqlRepository)
        assert injector.get_instance_of(services.Settings, Named("default")).source == "from-provider"

    def test_in_memory_module(self, monkeypatch: pytest.MonkeyPatch) -> None:
        module = types.ModuleType("fake_plugins")
        monkeypatch.setitem(sys.modules, "fake_plugins", module)

        class Plugin:
            pass

        Plugin.__module__ = "fake_plugins"
        module.Plugin = injectable(scope=SingletonScope)(Plugin)  # type: ignore[attr-defined]

        injector = Injector([ScannerModule("fake_plugins")])

        assert injector.get_instance_of(Plugin) is injector.get_instance_of(Plugin)
