"""Strategies that turn a key into an instance.

The set of binding variants is closed: ``InstanceBinding``,
``ProviderBinding`` (and its ``ConstructorBinding`` specialization) and
``Rebinding``. The injector only talks to them through ``build_instance``,
handing over a pull callback that resolves dependencies on demand.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, TypeAlias, final

from injectree.dependencies import NO_VALUE, Dependency, InstanceProvider, ProviderCallable
from injectree.exceptions import InjectreeScopeStateError, InjectreeUnresolvedDependencyError

if TYPE_CHECKING:
    from injectree.key import Key
    from injectree.scope import Scope

ScopeKind: TypeAlias = "type[Scope]"


class BindingKind(Enum):
    """Tag of each binding variant."""

    INSTANCE = "instance"
    PROVIDER = "provider"
    CONSTRUCTOR = "constructor"
    REBINDING = "rebinding"


class Binding(ABC):
    """Describe how instances of ``key`` are produced."""

    __slots__ = ("key", "scope")

    kind: ClassVar[BindingKind]

    def __init__(self, key: Key, *, scope: ScopeKind | None = None) -> None:
        self.key = key
        self.scope = scope

    @abstractmethod
    def build_instance(self, provide: InstanceProvider) -> Any:
        """Produce an instance, pulling dependencies through ``provide``."""

    def __repr__(self) -> str:
        scope = f", scope={self.scope.__name__}" if self.scope is not None else ""
        return f"{type(self).__name__}({self.key}{scope})"


@final
class InstanceBinding(Binding):
    """Bind a key to a value created ahead of time."""

    __slots__ = ("instance",)

    kind = BindingKind.INSTANCE

    def __init__(self, key: Key, instance: Any) -> None:
        super().__init__(key)
        self.instance = instance

    def build_instance(self, provide: InstanceProvider) -> Any:
        return self.instance


class ProviderBinding(Binding):
    """Bind a key to a callable whose parameters are injected.

    ``dependencies`` come from the introspection layer, ordered by parameter
    position. Positional dependencies are passed as positional arguments,
    the others by name.
    """

    __slots__ = ("dependencies", "provider")

    kind = BindingKind.PROVIDER

    def __init__(
        self,
        key: Key,
        provider: ProviderCallable,
        dependencies: Sequence[Dependency] = (),
        *,
        scope: ScopeKind | None = None,
    ) -> None:
        super().__init__(key, scope=scope)
        self.provider = provider
        self.dependencies = tuple(sorted(dependencies, key=lambda dependency: dependency.position))

    def build_instance(self, provide: InstanceProvider) -> Any:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}

        for dependency in self.dependencies:
            value = provide(dependency.key, dependency.nullable)
            if value is NO_VALUE:
                if not dependency.nullable:
                    raise InjectreeUnresolvedDependencyError(dependency.key)
                if not dependency.positional and dependency.has_default:
                    continue
                value = dependency.default if dependency.has_default else None

            if dependency.positional:
                args.append(value)
            else:
                kwargs[dependency.name] = value

        return self.provider(*args, **kwargs)


@final
class ConstructorBinding(ProviderBinding):
    """Bind a key to the constructor of ``implementation``.

    ``constructor`` is the callable picked by constructor selection: the class
    itself for ``__init__`` or a bound alternate-constructor classmethod.
    """

    __slots__ = ("implementation",)

    kind = BindingKind.CONSTRUCTOR

    def __init__(
        self,
        key: Key,
        implementation: type[Any],
        constructor: ProviderCallable,
        dependencies: Sequence[Dependency] = (),
        *,
        scope: ScopeKind | None = None,
    ) -> None:
        super().__init__(key, constructor, dependencies, scope=scope)
        self.implementation = implementation


@final
class Rebinding(Binding):
    """Alias a key to whatever another key resolves to."""

    __slots__ = ("target",)

    kind = BindingKind.REBINDING

    def __init__(self, key: Key, target: Key, *, scope: ScopeKind | None = None) -> None:
        super().__init__(key, scope=scope)
        self.target = target

    def build_instance(self, provide: InstanceProvider) -> Any:
        return provide(self.target, False)  # noqa: FBT003

    def __repr__(self) -> str:
        return f"Rebinding({self.key} -> {self.target})"


AnyBinding: TypeAlias = InstanceBinding | ProviderBinding | Rebinding
"""Every binding variant the injector accepts (``ConstructorBinding`` is a ``ProviderBinding``)."""

BINDING_TYPES: tuple[type[Binding], ...] = (InstanceBinding, ProviderBinding, Rebinding)


@final
class ScopedBinding:
    """Cache the instances of a binding in a scope.

    A cache hit returns the stored instance without calling the wrapped
    binding, so none of its dependencies are resolved again.
    """

    __slots__ = ("binding", "scope_instance")

    def __init__(self, binding: AnyBinding, scope_instance: Scope) -> None:
        self.binding = binding
        self.scope_instance = scope_instance

    @property
    def key(self) -> Key:
        return self.binding.key

    @property
    def scope(self) -> ScopeKind | None:
        return self.binding.scope

    @property
    def kind(self) -> BindingKind:
        return self.binding.kind

    def build_instance(self, provide: InstanceProvider) -> Any:
        scope = self.scope_instance
        if not scope.is_active:
            raise InjectreeScopeStateError(scope)

        cached = scope.get(self.key)
        if cached is not NO_VALUE:
            return cached

        instance = self.binding.build_instance(provide)
        scope.put(self.key, instance)
        return instance

    def __repr__(self) -> str:
        return f"ScopedBinding({self.binding!r}, {type(self.scope_instance).__name__})"
