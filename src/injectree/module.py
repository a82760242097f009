from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Hashable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from injectree.bindings import (
    AnyBinding,
    ConstructorBinding,
    InstanceBinding,
    ProviderBinding,
    Rebinding,
)
from injectree.dependencies import NO_VALUE
from injectree.exceptions import InjectreeConfigurationError
from injectree.introspection import describe_callable, select_constructor
from injectree.key import Key, make_key

if TYPE_CHECKING:
    from typing_extensions import Self

    from injectree.scope import Scope

logger = logging.getLogger(__name__)


@runtime_checkable
class Module(Protocol):
    """Declare bindings and scopes for an injector.

    Injectors read both sequences once, at construction, and never modify
    the module.
    """

    @property
    def bindings(self) -> Sequence[AnyBinding]: ...

    @property
    def scopes(self) -> Sequence[Scope]: ...


def provider_binding(
    key: Key,
    provider: Callable[..., Any],
    *,
    scope: type[Scope] | None = None,
) -> ProviderBinding:
    """Describe ``provider`` and bind ``key`` to it."""
    return ProviderBinding(key, provider, describe_callable(provider), scope=scope)


def constructor_binding(
    key: Key,
    implementation: type[Any],
    *,
    scope: type[Scope] | None = None,
) -> ConstructorBinding:
    """Select the constructor of ``implementation`` and bind ``key`` to it."""
    selected = select_constructor(implementation)
    return ConstructorBinding(
        key,
        selected.implementation,
        selected.function,
        selected.dependencies,
        scope=scope,
    )


class BindingBuilder:
    """Collect the configuration of one binding and build it.

    Without a target the key type is bound to its own constructor. At most
    one of ``to_instance``, ``to`` and ``to_provider`` may be used.
    """

    def __init__(self, type_: Any, qualifier: Hashable | None = None) -> None:
        self.key = make_key(type_, qualifier)
        self._instance: Any = NO_VALUE
        self._target: Key | None = None
        self._provider: Callable[..., Any] | None = None
        self._scope: type[Scope] | None = None

    def to_instance(self, instance: Any) -> Self:
        """Bind to a value created ahead of time."""
        self._instance = instance
        return self

    def to(self, type_: Any, qualifier: Hashable | None = None) -> Self:
        """Redirect to the binding of another key, usually an implementation."""
        self._target = make_key(type_, qualifier)
        return self

    def to_provider(self, provider: Callable[..., Any]) -> Self:
        """Build instances by calling ``provider`` with injected arguments."""
        self._provider = provider
        return self

    def in_scope(self, kind: type[Scope]) -> Self:
        """Cache instances in the injector's scope of ``kind``."""
        self._scope = kind
        return self

    def build(self) -> AnyBinding:
        """Return the binding described so far.

        Raises:
            InjectreeConfigurationError: If several targets were given, an
                instance binding was scoped, or the constructor of the key
                type cannot be selected.

        """
        has_instance = self._instance is not NO_VALUE
        targets = sum((has_instance, self._target is not None, self._provider is not None))
        if targets > 1:
            msg = f"Binding of {self.key} has more than one target."
            raise InjectreeConfigurationError(msg)

        if has_instance:
            if self._scope is not None:
                msg = f"Instance binding of {self.key} cannot be scoped."
                raise InjectreeConfigurationError(msg)
            return InstanceBinding(self.key, self._instance)
        if self._provider is not None:
            return provider_binding(self.key, self._provider, scope=self._scope)
        if self._target is not None:
            return Rebinding(self.key, self._target, scope=self._scope)
        return constructor_binding(self.key, self.key.type, scope=self._scope)


class BasicModule(ABC):
    """Module configured imperatively in ``configure``.

    Examples:
        .. code-block:: python

            class AppModule(BasicModule):
                def configure(self) -> None:
                    self.register_scope(RequestScope())

                    self.bind(str).to_instance("a")
                    self.bind(str, Named("b")).to_instance("b")
                    self.bind(Clock).in_scope(SingletonScope)
                    self.bind(Repository).to(SqlRepository)
                    self.bind(Session).to_provider(open_session).in_scope(RequestScope)

    """

    def __init__(self) -> None:
        self._bindings: list[AnyBinding] = []
        self._scopes: list[Scope] = []
        self._builders: list[BindingBuilder] = []

        self.configure()
        self._bindings.extend(builder.build() for builder in self._builders)
        self._builders.clear()

    @property
    def bindings(self) -> Sequence[AnyBinding]:
        return tuple(self._bindings)

    @property
    def scopes(self) -> Sequence[Scope]:
        return tuple(self._scopes)

    @abstractmethod
    def configure(self) -> None:
        """Declare bindings with ``bind`` and scopes with ``register_scope``."""

    def bind(self, type_: Any, qualifier: Hashable | None = None) -> BindingBuilder:
        """Start the binding of ``type_`` qualified by ``qualifier``."""
        builder = BindingBuilder(type_, qualifier)
        self._builders.append(builder)
        return builder

    def register_scope(self, scope: Scope) -> None:
        self._scopes.append(scope)

    def install(self, module: Module) -> None:
        """Add the scopes and bindings of ``module`` to this one."""
        logger.debug("Installing %s into %s", type(module).__name__, type(self).__name__)
        self._scopes.extend(module.scopes)
        self._bindings.extend(module.bindings)
