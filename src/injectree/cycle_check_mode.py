from __future__ import annotations

from enum import Enum


class CycleCheckMode(Enum):
    """Select how the resolution stack looks for circular dependencies.

    Both modes report the same chain; they only differ in when the check runs.
    """

    AMORTIZED = "amortized"
    """Scan the whole stack each time it doubles in depth; O(n log n) overall."""

    EAGER = "eager"
    """Check every pushed key against the stack; O(n) per push."""
