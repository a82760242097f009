"""Tests for the injectree exception hierarchy."""

from __future__ import annotations

import pytest

from injectree.exceptions import (
    InjectreeCircularDependencyError,
    InjectreeConfigurationError,
    InjectreeError,
    InjectreeInvalidKeyError,
    InjectreeScopeStateError,
    InjectreeUnresolvedDependencyError,
)
from injectree.key import make_key
from injectree.scope import RequestScope
from tests.fakes import Bar, Foo


@pytest.mark.parametrize(
    "error_type",
    [
        InjectreeCircularDependencyError,
        InjectreeConfigurationError,
        InjectreeInvalidKeyError,
        InjectreeScopeStateError,
        InjectreeUnresolvedDependencyError,
    ],
)
def test_every_error_is_an_injectree_error(error_type: type[Exception]) -> None:
    assert issubclass(error_type, InjectreeError)


def test_unresolved_dependency_error_without_injector_name() -> None:
    error = InjectreeUnresolvedDependencyError(make_key(Foo))

    assert error.key == make_key(Foo)
    assert error.injector_name is None
    assert str(error) == "Key(Foo) has no binding in the injector or any of its ancestors."


def test_circular_dependency_error_carries_chain() -> None:
    chain = [make_key(Foo), make_key(Bar), make_key(Foo)]

    error = InjectreeCircularDependencyError(chain)

    assert error.chain == chain
    assert error.key == make_key(Foo)
    assert str(error) == "Circular dependency detected on Key(Foo): Key(Foo) -> Key(Bar) -> Key(Foo)"


def test_scope_state_error_carries_scope() -> None:
    scope = RequestScope()

    error = InjectreeScopeStateError(scope)

    assert error.scope is scope
    assert str(error) == "RequestScope is not in progress."
