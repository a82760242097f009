from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

from injectree.cycle_check_mode import CycleCheckMode
from injectree.defaults import FIRST_CYCLE_SCAN_DEPTH
from injectree.exceptions import InjectreeCircularDependencyError

if TYPE_CHECKING:
    from injectree.key import Key

logger = logging.getLogger(__name__)

# Stack of the resolution running in the current context. Nested
# ``get_instance_of`` calls made by providers join it instead of starting over.
_resolution_stack: ContextVar[ResolutionStack | None] = ContextVar(
    "injectree_resolution_stack",
    default=None,
)


class ResolutionStack:
    """Track the keys being resolved and detect repeated keys.

    Entries pair a key with the resolver working on it, so a provider that
    asks another injector for the same key does not close a cycle. Only the
    keys are reported in the chain.

    In ``AMORTIZED`` mode the stack is scanned for duplicates only when its
    depth reaches twice the depth of the previous scan. When the stack shrinks
    below that depth the threshold follows it down, so a cycle in a later
    branch is caught at most a constant factor deeper than where it closed.
    """

    __slots__ = ("_entries", "_last_scan_depth", "_mode", "_next_scan_depth")

    def __init__(self, mode: CycleCheckMode) -> None:
        self._mode = mode
        self._entries: list[tuple[object, Key]] = []
        self._last_scan_depth = 0
        self._next_scan_depth = FIRST_CYCLE_SCAN_DEPTH

    @property
    def keys(self) -> tuple[Key, ...]:
        return tuple(key for _, key in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, key: Key, resolver: object = None) -> None:
        """Enter the resolution of ``key`` by ``resolver``.

        Raises:
            InjectreeCircularDependencyError: When ``key`` closes a cycle.

        """
        entry = (resolver, key)
        if self._mode is CycleCheckMode.EAGER:
            if entry in self._entries:
                first = self._entries.index(entry)
                self._raise_cycle([*self.keys[first:], key])
            self._entries.append(entry)
            return

        self._entries.append(entry)
        depth = len(self._entries)
        if depth >= self._next_scan_depth:
            self._last_scan_depth = depth
            self._next_scan_depth = depth * 2
            chain = self.find_cycle()
            if chain is not None:
                self._entries.pop()
                self._raise_cycle(chain)

    def pop(self) -> None:
        """Leave the resolution of the innermost key."""
        self._entries.pop()
        depth = len(self._entries)
        if depth < self._last_scan_depth:
            self._last_scan_depth = depth
            self._next_scan_depth = max(FIRST_CYCLE_SCAN_DEPTH, depth * 2)

    def find_cycle(self) -> list[Key] | None:
        """Return the first repeated stretch of keys, or ``None``.

        The chain runs from the first occurrence of the earliest repeated
        entry to its repetition.
        """
        first_seen: dict[tuple[object, Key], int] = {}
        for index, entry in enumerate(self._entries):
            first = first_seen.get(entry)
            if first is not None:
                return [key for _, key in self._entries[first : index + 1]]
            first_seen[entry] = index
        return None

    def _raise_cycle(self, chain: list[Key]) -> None:
        logger.debug("Circular dependency chain: %s", " -> ".join(map(str, chain)))
        raise InjectreeCircularDependencyError(chain)


@contextmanager
def resolution_stack(mode: CycleCheckMode) -> Iterator[ResolutionStack]:
    """Yield the stack of the running resolution, starting one if needed."""
    current = _resolution_stack.get()
    if current is not None:
        yield current
        return

    stack = ResolutionStack(mode)
    token = _resolution_stack.set(stack)
    try:
        yield stack
    finally:
        _resolution_stack.reset(token)
