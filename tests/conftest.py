"""Shared pytest fixtures for injectree tests."""

import pytest

from injectree.injector import Injector
from injectree.scope import SingletonScope
from tests.fakes import Module1, Module3


@pytest.fixture()
def injector() -> Injector:
    """Injector built from the default test module."""
    return Injector([Module1()], name="parent")


@pytest.fixture()
def child_injector(injector: Injector) -> Injector:
    """Child of ``injector`` overriding ``Bar`` and sharing its singleton scope."""
    return injector.create_child([Module3()], shared_scopes=[SingletonScope], name="child")
