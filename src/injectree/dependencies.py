from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias

from injectree.key import Key


class _Sentinel:
    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name

    def __bool__(self) -> bool:
        return False


NO_VALUE: Any = _Sentinel("NO_VALUE")
"""Returned by an instance provider for an optional key nobody binds."""

NO_DEFAULT: Any = _Sentinel("NO_DEFAULT")
"""Default of a ``Dependency`` whose parameter declares no default value."""


class InstanceProvider(Protocol):
    """Pull callback handed to ``Binding.build_instance`` by the injector."""

    def __call__(self, key: Key, optional: bool = False) -> Any:  # noqa: FBT001, FBT002
        """Return the instance bound to ``key`` or ``NO_VALUE`` when optional and unbound."""
        ...


ProviderCallable: TypeAlias = Callable[..., Any]
"""A function, bound method or class producing instances."""


@dataclass(frozen=True, slots=True)
class Dependency:
    """Describe one input of a provider or constructor."""

    name: str
    """Parameter name; keyword arguments use it."""
    key: Key
    """Key resolved for this parameter."""
    nullable: bool = False
    """Whether the parameter may be left without a bound value."""
    positional: bool = False
    """Whether the value is passed positionally instead of by name."""
    position: int = 0
    """Index of the parameter in the callable signature."""
    default: Any = NO_DEFAULT
    """Default declared by the parameter, or ``NO_DEFAULT``."""

    @property
    def has_default(self) -> bool:
        """Whether the parameter declares a default value."""
        return self.default is not NO_DEFAULT
