"""
Global progression flags.

Story-wide facts ("bunker_opened", "met_trader") that any character's
dialogue may check. Conversation gates fall back to these when the
character's own flags lack a name; dialogue side effects never write
here.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Optional

from engine.core.events import EventBus


logger = logging.getLogger(__name__)


class ProgressionEvent(Enum):
    """Progression events."""
    GLOBAL_FLAG_CHANGED = auto()


class ProgressionFlags:
    """
    Store of global flags.

    A flag counts as set while it has a non-empty value.

    Usage:
        progression = ProgressionFlags(event_bus)
        progression.set_flag("bunker_opened")
        progression.has_flag("bunker_opened")  # True
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus
        self._flags: dict[str, str] = {}

    def has_flag(self, name: str) -> bool:
        return bool(name) and bool(self._flags.get(name))

    def get_flag(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._flags.get(name, default)

    def set_flag(self, name: str, value: str = "true") -> None:
        """Set a global flag and announce the change."""
        if not name:
            logger.warning("Ignoring global flag with empty name")
            return

        previous = self._flags.get(name)
        self._flags[name] = value
        if previous != value:
            self._publish(name, value, previous)

    def remove_flag(self, name: str) -> None:
        previous = self._flags.pop(name, None)
        if previous is not None:
            self._publish(name, None, previous)

    def _publish(self, name: str, value: Optional[str], previous: Optional[str]) -> None:
        logger.debug(f"Global flag '{name}': {previous!r} -> {value!r}")
        if self.event_bus:
            self.event_bus.publish(
                ProgressionEvent.GLOBAL_FLAG_CHANGED,
                flag=name,
                value=value,
                previous=previous,
            )

    def all_flags(self) -> dict[str, str]:
        """Snapshot of every flag, for save data."""
        return self._flags.copy()

    def load_flags(self, flags: dict[str, str]) -> None:
        """Replace every flag from save data (no change events)."""
        self._flags = dict(flags)
