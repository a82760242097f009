"""pytest fixtures for applications built on injectree.

The plugin is not registered automatically. Enable it from a test module or
the top-level ``conftest.py``::

    pytest_plugins = ["injectree.integrations.pytest_plugin"]

It needs pytest, which the ``pytest`` extra installs.
"""

from __future__ import annotations

import pytest

from injectree.injector import Injector
from injectree.module import Module


@pytest.fixture()
def injectree_modules() -> list[Module]:
    """Modules the ``injectree_injector`` fixture is built from.

    Override this fixture in a test module or ``conftest.py`` to configure
    the injector, for example to swap real bindings for fakes.

    Returns:
        An empty list.

    """
    return []


@pytest.fixture()
def injectree_injector(injectree_modules: list[Module]) -> Injector:
    """Create a per-test injector from ``injectree_modules``.

    The fixture is function-scoped, so singletons are never shared between
    tests unless users override fixture scope explicitly.

    Returns:
        A new ``Injector`` named ``"pytest"``.

    """
    return Injector(injectree_modules, name="pytest")
