"""
Flag conditions for dialogue gates.

A gate is a pair of flag lists: every required flag must be present
and no blocked flag may be present. Lookups go to the conversation
target's own flags first and fall back to the global progression
flags; writes only ever touch the target's flags.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Protocol


logger = logging.getLogger(__name__)


FlagLookup = Callable[[str], bool]


class FlagStore(Protocol):
    """A mutable flag store (one per conversation target)."""

    def has_flag(self, name: str) -> bool: ...

    def set_flag(self, name: str, value: str = "true") -> None: ...

    def remove_flag(self, name: str) -> None: ...


class FlagSource(Protocol):
    """A read-only flag lookup, used for the global fallback."""

    def has_flag(self, name: str) -> bool: ...


def conditions_met(
    required: Iterable[str],
    blocked: Iterable[str],
    has_flag: FlagLookup,
) -> bool:
    """
    Evaluate a required/blocked flag gate.

    Args:
        required: Flags that must all be present (empty passes)
        blocked: Flags of which none may be present (empty passes)
        has_flag: Flag lookup

    Returns:
        True if the gate is open
    """
    if any(not has_flag(flag) for flag in required):
        return False
    return not any(has_flag(flag) for flag in blocked)


class FlagContext:
    """
    The flag view of one conversation.

    Attributes:
        local: The target's flag store, mutated by dialogue side effects
        global_flags: Optional fallback consulted by ``has`` only
        trace: Log every lookup at DEBUG level
    """

    def __init__(
        self,
        local: FlagStore,
        global_flags: FlagSource | None = None,
        trace: bool = False,
    ):
        self.local = local
        self.global_flags = global_flags
        self.trace = trace

    def has(self, name: str) -> bool:
        """Check a flag locally, then globally. Empty names are never set."""
        if not name:
            return False

        if self.local.has_flag(name):
            found = True
        else:
            found = self.global_flags is not None and self.global_flags.has_flag(name)

        if self.trace:
            logger.debug(f"Flag '{name}': {'present' if found else 'absent'}")
        return found

    def check(self, required: Iterable[str], blocked: Iterable[str]) -> bool:
        return conditions_met(required, blocked, self.has)

    def set(self, name: str, value: str = "true") -> None:
        self.local.set_flag(name, value)

    def remove(self, name: str) -> None:
        self.local.remove_flag(name)

    def apply(self, set_flags: Iterable[str], remove_flags: Iterable[str]) -> None:
        """Apply a line or option's flag side effects (sets, then removals)."""
        set_flags = list(set_flags)
        remove_flags = list(remove_flags)

        if set_flags:
            logger.debug(f"Setting flags: {', '.join(set_flags)}")
        for name in set_flags:
            if name:
                self.local.set_flag(name)

        if remove_flags:
            logger.debug(f"Removing flags: {', '.join(remove_flags)}")
        for name in remove_flags:
            if name:
                self.local.remove_flag(name)


def check_conditions(
    required: Iterable[str],
    blocked: Iterable[str],
    context: FlagContext | None,
) -> bool:
    """
    Evaluate a gate against an optional flag context.

    Dialogue that is not bound to a flag owner (cutscenes, signs) has no
    context; every gate is open for it.
    """
    if context is None:
        return True
    return context.check(required, blocked)
