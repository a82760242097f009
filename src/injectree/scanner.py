from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from collections.abc import Iterator, Sequence
from types import ModuleType
from typing import TYPE_CHECKING, Any

from injectree.markers import INJECTABLE_ATTR, InjectableSpec
from injectree.module import BindingBuilder

if TYPE_CHECKING:
    from injectree.bindings import AnyBinding
    from injectree.scope import Scope

logger = logging.getLogger(__name__)


class ScannerModule:
    """Module built from the ``@injectable`` classes of some Python modules.

    Packages are walked recursively. Only classes defined in a scanned module
    are collected, so re-exported classes are bound once.

    Examples:
        .. code-block:: python

            injector = Injector([ScannerModule("myapp.services", "myapp.repositories")])

    """

    def __init__(self, *modules: ModuleType | str) -> None:
        self._scopes: list[Scope] = []
        self._bindings: list[AnyBinding] = []
        for module in self._iter_modules(modules):
            self._scan(module)

    @property
    def bindings(self) -> Sequence[AnyBinding]:
        return tuple(self._bindings)

    @property
    def scopes(self) -> Sequence[Scope]:
        return tuple(self._scopes)

    def register_binding(self, cls: type[Any], spec: InjectableSpec) -> None:
        """Build and add the binding an ``@injectable`` class asks for."""
        builder = BindingBuilder(cls, spec.qualifier)
        if spec.scope is not None:
            builder.in_scope(spec.scope)
        if spec.implemented_by is not None:
            builder.to(spec.implemented_by)
        if spec.provided_by is not None:
            builder.to_provider(spec.provided_by)
        self._bindings.append(builder.build())

    def _scan(self, module: ModuleType) -> None:
        for _, candidate in inspect.getmembers(module, inspect.isclass):
            if candidate.__module__ != module.__name__:
                continue
            spec = candidate.__dict__.get(INJECTABLE_ATTR)
            if isinstance(spec, InjectableSpec):
                logger.debug("Scanned injectable %s in %s", candidate.__qualname__, module.__name__)
                self.register_binding(candidate, spec)

    def _iter_modules(self, modules: Sequence[ModuleType | str]) -> Iterator[ModuleType]:
        for entry in modules:
            module = importlib.import_module(entry) if isinstance(entry, str) else entry
            yield module
            if hasattr(module, "__path__"):
                for info in pkgutil.walk_packages(module.__path__, prefix=f"{module.__name__}."):
                    yield importlib.import_module(info.name)
