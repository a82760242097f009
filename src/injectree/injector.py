from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Sequence
from typing import TYPE_CHECKING, Any, TypeVar, overload

from injectree.bindings import BINDING_TYPES, AnyBinding, InstanceBinding, ScopedBinding
from injectree.cycle_check_mode import CycleCheckMode
from injectree.defaults import DEFAULT_CYCLE_CHECK_MODE, DEFAULT_SHARED_SCOPES
from injectree.dependencies import NO_VALUE
from injectree.exceptions import InjectreeConfigurationError, InjectreeUnresolvedDependencyError
from injectree.key import Key, make_key
from injectree.resolution_stack import ResolutionStack, resolution_stack
from injectree.scope import Scope, SingletonScope

if TYPE_CHECKING:
    from injectree.module import Module

T = TypeVar("T")

logger = logging.getLogger(__name__)

RegisteredBinding = AnyBinding | ScopedBinding


class Injector:
    """Build object graphs from the bindings of its modules and its ancestors.

    An injector owns a table of bindings and a table of scopes, both filled
    once at construction from the given modules. Lookups that miss the own
    table fall back to the parent chain; a child never mutates its parent.

    Every injector binds itself under ``Key(Injector)`` and its scopes under
    the key of their kind, so constructed objects can ask for either.

    Examples:
        .. code-block:: python

            class AppModule(BasicModule):
                def configure(self) -> None:
                    self.bind(str).to_instance("postgres://")
                    self.bind(Database).in_scope(SingletonScope)


            injector = Injector([AppModule()], name="app")
            database = injector.get_instance_of(Database)

            request_injector = injector.create_child(
                [RequestModule()],
                shared_scopes=[SingletonScope],
            )

    """

    def __init__(
        self,
        modules: Iterable[Module] = (),
        *,
        parent: Injector | None = None,
        shared_scopes: Sequence[type[Scope]] | None = None,
        name: str | None = None,
        cycle_check_mode: CycleCheckMode = DEFAULT_CYCLE_CHECK_MODE,
    ) -> None:
        """Register the built-in bindings, the shared scopes and the given modules.

        Args:
            modules: Modules whose scopes and bindings are registered, in order.
                Later bindings for the same key replace earlier ones.
            parent: Injector consulted for keys this one does not bind.
            shared_scopes: Scope kinds whose cache is shared with ``parent``
                instead of starting empty in this injector.
            name: Name used in logs and error messages.
            cycle_check_mode: Strategy used to detect circular dependencies.

        Raises:
            InjectreeConfigurationError: If scopes are shared without a parent
                or the parent lacks a requested kind, or a binding names a
                scope kind that is not registered.

        """
        self.parent = parent
        self.name = name
        self.cycle_check_mode = cycle_check_mode
        self._bindings: dict[Key, RegisteredBinding] = {}
        self._scopes: dict[type[Scope], Scope] = {}

        self.register_binding(InstanceBinding(make_key(Injector), self))
        self.register_scope(SingletonScope())

        shared = tuple(shared_scopes) if shared_scopes is not None else DEFAULT_SHARED_SCOPES
        if shared:
            self._share_parent_scopes(shared)

        modules = list(modules)
        for module in modules:
            for scope in module.scopes:
                self.register_scope(scope)
        for module in modules:
            for binding in module.bindings:
                self.register_binding(binding)

        logger.debug(
            "Created %r with %d modules, %d bindings and scopes %s",
            self,
            len(modules),
            len(self._bindings),
            [kind.__name__ for kind in self._scopes],
        )

    @property
    def bindings(self) -> list[RegisteredBinding]:
        """Own bindings followed by the bindings of every ancestor."""
        bindings = list(self._bindings.values())
        if self.parent is not None:
            bindings.extend(self.parent.bindings)
        return bindings

    @property
    def scopes(self) -> list[Scope]:
        """Scopes registered on this injector, shared ones included."""
        return list(self._scopes.values())

    def create_child(
        self,
        modules: Iterable[Module] = (),
        *,
        shared_scopes: Sequence[type[Scope]] | None = None,
        name: str | None = None,
    ) -> Injector:
        """Return a new injector whose parent is this one."""
        logger.debug("Creating child %r of %r", name, self)
        return Injector(
            modules,
            parent=self,
            shared_scopes=shared_scopes,
            name=name,
            cycle_check_mode=self.cycle_check_mode,
        )

    def register_scope(self, scope: Scope) -> None:
        """Register ``scope`` for its kind and bind it under ``Key(kind)``."""
        kind = scope.kind
        if kind in self._scopes and self._scopes[kind] is not scope:
            logger.debug("%r replaces its %s", self, kind.__name__)
        self._scopes[kind] = scope
        self._bindings[make_key(kind)] = InstanceBinding(make_key(kind), scope)

    def register_binding(self, binding: AnyBinding) -> None:
        """Register ``binding``, wrapping it in its scope when it names one.

        Raises:
            InjectreeConfigurationError: If the binding is not one of the binding
                variants or names a scope kind not registered here.

        """
        if not isinstance(binding, BINDING_TYPES):
            msg = f"Unsupported binding {binding!r}; expected one of the injectree binding variants."
            raise InjectreeConfigurationError(msg)

        registered: RegisteredBinding = binding
        if binding.scope is not None:
            scope = self._scopes.get(binding.scope)
            if scope is None:
                msg = (
                    f"{binding.scope.__name__} is not a registered scope of {self!r}; "
                    f"needed by {binding!r}."
                )
                raise InjectreeConfigurationError(msg)
            registered = ScopedBinding(binding, scope)

        if binding.key in self._bindings:
            logger.debug("%r overrides the binding of %s", self, binding.key)
        self._bindings[binding.key] = registered

    def contains_binding_for(self, key: Key) -> bool:
        """Whether this injector or one of its ancestors binds ``key``."""
        if key in self._bindings:
            return True
        return self.parent is not None and self.parent.contains_binding_for(key)

    @overload
    def get_instance_of(self, type_: type[T], qualifier: Hashable | None = None) -> T: ...

    @overload
    def get_instance_of(self, type_: Any, qualifier: Hashable | None = None) -> Any: ...

    def get_instance_of(self, type_: Any, qualifier: Hashable | None = None) -> Any:
        """Resolve the instance bound to ``type_`` and ``qualifier``.

        Raises:
            InjectreeUnresolvedDependencyError: If no injector in the chain binds
                the key or one of its required dependencies.
            InjectreeCircularDependencyError: If the key depends on itself.
            InjectreeScopeStateError: If a scoped binding is resolved outside
                of its scope window.

        """
        return self.get_instance_of_key(make_key(type_, qualifier))

    def get_instance_of_key(self, key: Key) -> Any:
        """Resolve the instance bound to ``key``."""
        with resolution_stack(self.cycle_check_mode) as stack:
            return self._resolve(key, stack)

    def _resolve(self, key: Key, stack: ResolutionStack) -> Any:
        stack.push(key, self)
        try:
            binding = self._find_binding(key)
            if binding is None:
                logger.debug("No binding for %s while resolving %s", key, stack.keys[0])
                raise InjectreeUnresolvedDependencyError(key, self.name)

            def provide(dependency_key: Key, optional: bool = False) -> Any:  # noqa: FBT001, FBT002
                if optional and not self.contains_binding_for(dependency_key):
                    return NO_VALUE
                return self._resolve(dependency_key, stack)

            return binding.build_instance(provide)
        finally:
            stack.pop()

    def _find_binding(self, key: Key) -> RegisteredBinding | None:
        binding = self._bindings.get(key)
        if binding is not None:
            return binding
        if self.parent is not None:
            return self.parent._find_binding(key)  # noqa: SLF001
        return None

    def _share_parent_scopes(self, kinds: Sequence[type[Scope]]) -> None:
        if self.parent is None:
            msg = f"{self!r} cannot share scopes without a parent injector."
            raise InjectreeConfigurationError(msg)

        for kind in kinds:
            scope = self.parent._scopes.get(kind)  # noqa: SLF001
            if scope is None:
                msg = f"Parent {self.parent!r} has no {kind.__name__} to share."
                raise InjectreeConfigurationError(msg)
            self.register_scope(scope)
            logger.debug("%r shares %s with %r", self, kind.__name__, self.parent)

    def __repr__(self) -> str:
        return f"Injector(name={self.name!r})"
