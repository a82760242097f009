from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from injectree.dependencies import NO_VALUE
from injectree.exceptions import InjectreeScopeStateError

if TYPE_CHECKING:
    from types import TracebackType

    from typing_extensions import Self

    from injectree.key import Key

logger = logging.getLogger(__name__)


class Scope(ABC):
    """Cache instances of scoped bindings for the duration of an activity window.

    A scope is identified by its kind, which is its class: bindings name the
    kind (for example ``SingletonScope``) and each injector holds at most one
    scope object per kind.
    """

    def __init__(self) -> None:
        self._instances: dict[Key, Any] = {}

    @property
    def kind(self) -> type[Scope]:
        """The identifier bindings use to refer to this scope."""
        return type(self)

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """Whether instances can currently be read from or stored in this scope."""

    def get(self, key: Key) -> Any:
        """Return the instance cached for ``key`` or ``NO_VALUE``."""
        self._ensure_active()
        return self._instances.get(key, NO_VALUE)

    def put(self, key: Key, instance: Any) -> None:
        """Cache ``instance`` for ``key``.

        Injectors only store an instance after a cache miss, so a second store
        for the same key means the cache-check-before-build sequence was
        broken somewhere.
        """
        self._ensure_active()
        if key in self._instances:
            msg = f"{type(self).__name__} already holds an instance of {key}."
            raise RuntimeError(msg)
        self._instances[key] = instance

    def contains(self, key: Key) -> bool:
        """Whether an instance of ``key`` is cached."""
        return self.is_active and key in self._instances

    def _ensure_active(self) -> None:
        if not self.is_active:
            raise InjectreeScopeStateError(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(instances={len(self._instances)})"


class SingletonScope(Scope):
    """Keep one instance per key for the whole life of the owning injector."""

    @property
    def is_active(self) -> bool:
        return True


class WindowScope(Scope):
    """A scope that only holds instances between ``enter()`` and ``exit()``.

    Leaving the window drops every cached instance, so the next window starts
    empty. Subclass it to declare a new scope kind.

    Examples:
        .. code-block:: python

            request_scope = injector.get_instance_of(RequestScope)
            with request_scope:
                handler = injector.get_instance_of(Handler)

    """

    def __init__(self) -> None:
        super().__init__()
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def enter(self) -> None:
        """Open the window; entering an open window is an error."""
        if self._active:
            msg = f"{type(self).__name__} is already in progress."
            raise RuntimeError(msg)
        self._active = True
        logger.debug("Entered %s", type(self).__name__)

    def exit(self) -> None:
        """Close the window and release cached instances. Idempotent."""
        if not self._active:
            return
        self._active = False
        self._instances.clear()
        logger.debug("Exited %s", type(self).__name__)

    def __enter__(self) -> Self:
        self.enter()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.exit()


class RequestScope(WindowScope):
    """Window scope for the lifetime of one request."""


class SessionScope(WindowScope):
    """Window scope for the lifetime of one session."""
