from injectree.cycle_check_mode import CycleCheckMode
from injectree.scope import Scope

DEFAULT_CYCLE_CHECK_MODE: CycleCheckMode = CycleCheckMode.AMORTIZED
"""Cycle check strategy used by injectors that do not choose one."""

DEFAULT_SHARED_SCOPES: tuple[type[Scope], ...] = ()
"""Scope kinds a child injector shares with its parent unless told otherwise."""

FIRST_CYCLE_SCAN_DEPTH = 2
"""Stack depth at which the amortized strategy runs its first duplicate scan."""
