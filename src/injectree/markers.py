from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, TypeVar, overload

from injectree.scope import Scope, SingletonScope

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])

INJECT_ATTR = "__injectree_inject__"
CONSTRUCTOR_ATTR = "__injectree_constructor__"
SCOPE_ATTR = "__injectree_scope__"
INJECTABLE_ATTR = "__injectree_injectable__"


def _mark(target: Any, attribute: str, value: Any) -> None:
    function = target.__func__ if isinstance(target, classmethod | staticmethod) else target
    setattr(function, attribute, value)


def marker_of(target: Any, attribute: str, default: Any = None) -> Any:
    """Read a marker set by one of the decorators of this module."""
    function = target.__func__ if isinstance(target, classmethod | staticmethod) else target
    return getattr(function, attribute, default)


def inject(target: T) -> T:
    """Mark ``__init__`` or an alternate-constructor classmethod as the injection point.

    Examples:
        .. code-block:: python

            class Client:
                def __init__(self, url: str = "", timeout: float = 1.0) -> None: ...

                @classmethod
                @inject
                def from_settings(cls, settings: Settings) -> Client: ...

    """
    _mark(target, INJECT_ATTR, True)  # noqa: FBT003
    return target


def constructor(target: T) -> T:
    """Declare a classmethod as an alternate constructor taking part in constructor selection."""
    _mark(target, CONSTRUCTOR_ATTR, True)  # noqa: FBT003
    return target


@dataclass(frozen=True, slots=True)
class InScope:
    """Attach a scope kind to a declaration.

    Works as ``typing.Annotated`` metadata on declarative module attributes
    and as a decorator on declarative provider methods.
    """

    kind: type[Scope]

    def __call__(self, function: F) -> F:
        _mark(function, SCOPE_ATTR, self.kind)
        return function


Singleton = InScope(SingletonScope)
"""Scope marker for singleton bindings."""


@dataclass(frozen=True, slots=True)
class InjectableSpec:
    """Binding metadata collected by ``@injectable`` for the scanner."""

    qualifier: Hashable | None = None
    scope: type[Scope] | None = None
    implemented_by: type[Any] | None = None
    provided_by: Callable[..., Any] | None = None


@overload
def injectable(cls: type[T], /) -> type[T]: ...


@overload
def injectable(
    *,
    qualifier: Hashable | None = None,
    scope: type[Scope] | None = None,
    implemented_by: type[Any] | None = None,
    provided_by: Callable[..., Any] | None = None,
) -> Callable[[type[T]], type[T]]: ...


def injectable(
    cls: type[T] | None = None,
    /,
    *,
    qualifier: Hashable | None = None,
    scope: type[Scope] | None = None,
    implemented_by: type[Any] | None = None,
    provided_by: Callable[..., Any] | None = None,
) -> type[T] | Callable[[type[T]], type[T]]:
    """Mark a class for discovery by ``ScannerModule``.

    Args:
        cls: The decorated class when used without arguments.
        qualifier: Qualifier of the produced binding key.
        scope: Scope kind the instances are cached in.
        implemented_by: Bind the class to this implementation instead of its
            own constructor.
        provided_by: Build instances with this function instead of the
            constructor.

    Examples:
        .. code-block:: python

            @injectable(scope=SingletonScope)
            class Clock: ...

            @injectable(implemented_by=SqlRepository)
            class Repository: ...

    """
    spec = InjectableSpec(
        qualifier=qualifier,
        scope=scope,
        implemented_by=implemented_by,
        provided_by=provided_by,
    )

    def decorator(target: type[T]) -> type[T]:
        setattr(target, INJECTABLE_ATTR, spec)
        return target

    if cls is not None:
        return decorator(cls)
    return decorator
