from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Annotated, Any, get_args, get_origin

from injectree.exceptions import InjectreeInvalidKeyError

_ANNOTATED_MIN_ARGS = 2


@dataclass(frozen=True)
class Qualifier:
    """Base class for qualifiers that can be attached through ``typing.Annotated``.

    Subclass it (keeping it a frozen dataclass) to define project specific
    qualifiers; instances found in ``Annotated`` metadata become the
    qualifier of the resulting ``Key``.
    """


@dataclass(frozen=True)
class Named(Qualifier):
    """Distinguish several bindings of one type by name.

    Examples:
        .. code-block:: python

            from typing import Annotated

            ReplicaDb = Annotated[Database, Named("replica")]

            injector.get_instance_of(Database, Named("replica"))

    """

    name: str


@dataclass(frozen=True, slots=True)
class Key:
    """Identify a binding by type and optional qualifier.

    Keys compare and hash structurally, so two keys built from equal parts are
    interchangeable everywhere in the engine.
    """

    type: Any
    qualifier: Hashable | None = None

    def __post_init__(self) -> None:
        if self.type is None:
            msg = "Key type must not be None."
            raise InjectreeInvalidKeyError(msg)

    @classmethod
    def from_value(cls, value: Any) -> Key:
        """Build a key from a ``Key``, a type or an ``Annotated`` type."""
        if isinstance(value, Key):
            return value
        if get_origin(value) is Annotated:
            args = get_args(value)
            if len(args) >= _ANNOTATED_MIN_ARGS:
                qualifier = next((item for item in args[1:] if isinstance(item, Qualifier)), None)
                return cls(type=args[0], qualifier=qualifier)
        return cls(type=value)

    def __str__(self) -> str:
        type_name = getattr(self.type, "__qualname__", repr(self.type))
        if self.qualifier is None:
            return f"Key({type_name})"
        return f"Key({type_name}, qualifier={self.qualifier!r})"


def make_key(type_: Any, qualifier: Hashable | None = None) -> Key:
    """Return the key for ``type_`` qualified by ``qualifier``.

    Raises:
        InjectreeInvalidKeyError: If ``type_`` is ``None``.

    """
    return Key(type=type_, qualifier=qualifier)
