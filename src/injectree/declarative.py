from __future__ import annotations

import inspect
from collections.abc import Sequence
from typing import TYPE_CHECKING, Annotated, Any, ClassVar, get_args, get_origin, get_type_hints

from injectree.bindings import AnyBinding, InstanceBinding, ProviderBinding
from injectree.dependencies import NO_VALUE
from injectree.exceptions import InjectreeConfigurationError
from injectree.introspection import describe_callable
from injectree.key import Key
from injectree.markers import SCOPE_ATTR, InScope, marker_of
from injectree.module import constructor_binding

if TYPE_CHECKING:
    from injectree.module import Module
    from injectree.scope import Scope

_RESERVED_NAMES = frozenset({"bindings", "scopes", "install", "declare_scopes"})


class DeclarativeModule:
    """Module whose bindings are the members of its class.

    * An annotated attribute with a value binds its type to that value.
    * An annotated attribute without a value binds the annotated class to its
      constructor.
    * A public method with a return annotation is a provider for that type;
      its parameters are injected.

    Qualifiers come from ``Annotated[..., Named(...)]``; scopes from
    ``Annotated[..., Singleton]`` metadata or the ``@Singleton`` /
    ``@InScope(kind)`` decorators on methods.

    Examples:
        .. code-block:: python

            class AppModule(DeclarativeModule):
                server_address: str = "127.0.0.1"
                clock: Annotated[Clock, Singleton]
                replica: Annotated[Database, Named("replica")]

                @Singleton
                def repository(self, database: Database) -> Repository:
                    return SqlRepository(database)

    """

    def __init__(self) -> None:
        self._scopes: list[Scope] = list(self.declare_scopes())
        self._bindings: list[AnyBinding] = self._read_bindings()

    @property
    def bindings(self) -> Sequence[AnyBinding]:
        return tuple(self._bindings)

    @property
    def scopes(self) -> Sequence[Scope]:
        return tuple(self._scopes)

    def declare_scopes(self) -> Sequence[Scope]:
        """Return the scopes this module registers; none by default."""
        return ()

    def install(self, module: Module) -> None:
        """Add the scopes and bindings of ``module`` to this one."""
        self._scopes.extend(module.scopes)
        self._bindings.extend(module.bindings)

    def _read_bindings(self) -> list[AnyBinding]:
        bindings = [
            self._attribute_binding(name, annotation)
            for name, annotation in get_type_hints(type(self), include_extras=True).items()
            if not _is_ignored(name) and get_origin(annotation) is not ClassVar
        ]
        bindings.extend(self._method_bindings())
        return bindings

    def _attribute_binding(self, name: str, annotation: Any) -> AnyBinding:
        type_, qualifier, scope = _split_annotation(annotation)
        key = Key(type=type_, qualifier=qualifier)
        value = getattr(self, name, NO_VALUE)

        if value is not NO_VALUE:
            if scope is not None:
                msg = f"Attribute '{name}' of {type(self).__name__} binds an instance and cannot be scoped."
                raise InjectreeConfigurationError(msg)
            return InstanceBinding(key, value)
        return constructor_binding(key, type_, scope=scope)

    def _method_bindings(self) -> list[AnyBinding]:
        seen: set[str] = set()
        bindings: list[AnyBinding] = []
        for klass in type(self).__mro__:
            if klass is DeclarativeModule or not issubclass(klass, DeclarativeModule):
                continue
            for name, attribute in vars(klass).items():
                if name in seen or _is_ignored(name) or not inspect.isfunction(attribute):
                    continue
                seen.add(name)
                bindings.append(self._method_binding(name, attribute))
        return bindings

    def _method_binding(self, name: str, function: Any) -> ProviderBinding:
        return_annotation = get_type_hints(function, include_extras=True).get("return")
        if return_annotation is None:
            msg = (
                f"Provider method '{name}' of {type(self).__name__} needs a return "
                "annotation naming the type it provides."
            )
            raise InjectreeConfigurationError(msg)

        type_, qualifier, scope = _split_annotation(return_annotation)
        scope = marker_of(function, SCOPE_ATTR) or scope
        method = getattr(self, name)
        return ProviderBinding(
            Key(type=type_, qualifier=qualifier),
            method,
            describe_callable(method),
            scope=scope,
        )


def _is_ignored(name: str) -> bool:
    return name.startswith("_") or name in _RESERVED_NAMES


def _split_annotation(annotation: Any) -> tuple[Any, Any, type[Scope] | None]:
    if get_origin(annotation) is not Annotated:
        return annotation, None, None
    type_, *metadata = get_args(annotation)
    scope = next((item.kind for item in metadata if isinstance(item, InScope)), None)
    return type_, Key.from_value(annotation).qualifier, scope
