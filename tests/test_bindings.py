"""Tests for binding variants and scoped bindings."""

from __future__ import annotations

from typing import Any

import pytest

from injectree.bindings import (
    BindingKind,
    ConstructorBinding,
    InstanceBinding,
    ProviderBinding,
    Rebinding,
    ScopedBinding,
)
from injectree.dependencies import NO_VALUE, Dependency
from injectree.exceptions import InjectreeScopeStateError, InjectreeUnresolvedDependencyError
from injectree.key import Key, make_key
from injectree.scope import RequestScope, SingletonScope
from tests.fakes import Bar, Foo


class RecordingProvider:
    """Pull callback answering from a fixed table and recording requests."""

    def __init__(self, values: dict[Key, Any]) -> None:
        self.values = values
        self.requests: list[tuple[Key, bool]] = []

    def __call__(self, key: Key, optional: bool = False) -> Any:  # noqa: FBT001, FBT002
        self.requests.append((key, optional))
        return self.values.get(key, NO_VALUE)


def join(first: str, second: str = "-", /, *, suffix: str = "") -> str:
    return f"{first}{second}{suffix}"


class TestInstanceBinding:
    def test_returns_stored_value_without_pulling(self) -> None:
        provide = RecordingProvider({})
        binding = InstanceBinding(make_key(str), "a")

        assert binding.build_instance(provide) == "a"
        assert provide.requests == []
        assert binding.kind is BindingKind.INSTANCE
        assert binding.scope is None


class TestProviderBinding:
    def test_pulls_each_dependency_in_position_order(self) -> None:
        foo = Foo("x")
        provide = RecordingProvider({make_key(Foo): foo, make_key(str): "name"})
        binding = ProviderBinding(
            make_key(tuple),
            lambda name, foo: (name, foo),
            [
                Dependency("foo", make_key(Foo), position=1),
                Dependency("name", make_key(str), position=0),
            ],
        )

        assert binding.build_instance(provide) == ("name", foo)
        assert provide.requests == [(make_key(str), False), (make_key(Foo), False)]

    def test_positional_dependencies_are_passed_positionally(self) -> None:
        provide = RecordingProvider({make_key(str): "a", make_key(str, "suffix"): "!"})
        binding = ProviderBinding(
            make_key(str, "joined"),
            join,
            [
                Dependency("first", make_key(str), positional=True, position=0),
                Dependency("suffix", make_key(str, "suffix"), position=2),
            ],
        )

        assert binding.build_instance(provide) == "a-!"

    def test_missing_required_dependency_raises(self) -> None:
        binding = ProviderBinding(make_key(Bar), Bar, [Dependency("foo", make_key(Foo))])

        with pytest.raises(InjectreeUnresolvedDependencyError) as exc_info:
            binding.build_instance(RecordingProvider({}))

        assert exc_info.value.key == make_key(Foo)

    def test_missing_named_dependency_with_default_is_omitted(self) -> None:
        provide = RecordingProvider({})
        binding = ProviderBinding(
            make_key(str),
            lambda value="fallback": value,
            [Dependency("value", make_key(str), nullable=True, default="fallback")],
        )

        assert binding.build_instance(provide) == "fallback"
        assert provide.requests == [(make_key(str), True)]

    def test_missing_nullable_dependency_without_default_is_none(self) -> None:
        binding = ProviderBinding(
            make_key(list),
            lambda foo: [foo],
            [Dependency("foo", make_key(Foo), nullable=True)],
        )

        assert binding.build_instance(RecordingProvider({})) == [None]

    def test_missing_positional_dependency_uses_default(self) -> None:
        binding = ProviderBinding(
            make_key(str),
            join,
            [
                Dependency("first", make_key(str), positional=True, position=0),
                Dependency("second", make_key(str, "sep"), nullable=True, positional=True, position=1, default="+"),
            ],
        )

        assert binding.build_instance(RecordingProvider({make_key(str): "a"})) == "a+"


class TestConstructorBinding:
    def test_calls_constructor_with_dependencies(self) -> None:
        foo = Foo("x")
        binding = ConstructorBinding(make_key(Bar), Bar, Bar, [Dependency("foo", make_key(Foo))])

        bar = binding.build_instance(RecordingProvider({make_key(Foo): foo}))

        assert isinstance(bar, Bar)
        assert bar.foo is foo
        assert binding.kind is BindingKind.CONSTRUCTOR
        assert binding.implementation is Bar


class TestRebinding:
    def test_returns_instance_of_target_key(self) -> None:
        provide = RecordingProvider({make_key(str, "target"): "value"})
        binding = Rebinding(make_key(str), make_key(str, "target"))

        assert binding.build_instance(provide) == "value"
        assert provide.requests == [(make_key(str, "target"), False)]
        assert binding.kind is BindingKind.REBINDING


class TestScopedBinding:
    def test_builds_once_and_then_returns_cached_instance(self) -> None:
        provide = RecordingProvider({make_key(Foo): Foo("x")})
        binding = ScopedBinding(
            ConstructorBinding(make_key(Bar), Bar, Bar, [Dependency("foo", make_key(Foo))]),
            SingletonScope(),
        )

        first = binding.build_instance(provide)
        second = binding.build_instance(provide)

        assert first is second
        assert provide.requests == [(make_key(Foo), False)]

    def test_delegates_key_scope_and_kind(self) -> None:
        wrapped = ProviderBinding(make_key(Foo), Foo, scope=SingletonScope)
        binding = ScopedBinding(wrapped, SingletonScope())

        assert binding.key == make_key(Foo)
        assert binding.scope is SingletonScope
        assert binding.kind is BindingKind.PROVIDER

    def test_inactive_scope_raises_scope_state_error(self) -> None:
        scope = RequestScope()
        binding = ScopedBinding(InstanceBinding(make_key(str), "a"), scope)

        with pytest.raises(InjectreeScopeStateError) as exc_info:
            binding.build_instance(RecordingProvider({}))

        assert exc_info.value.scope is scope

    def test_window_scope_caches_only_inside_window(self) -> None:
        scope = RequestScope()
        binding = ScopedBinding(ProviderBinding(make_key(object), object), scope)
        provide = RecordingProvider({})

        with scope:
            first = binding.build_instance(provide)
            assert binding.build_instance(provide) is first
        with scope:
            assert binding.build_instance(provide) is not first
