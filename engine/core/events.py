"""
Typed event bus for decoupled communication.

Event types are Enum members, never strings. Each package declares its
own Enum (UIEvent, DialogueEvent, ProgressionEvent, ...) and publishes
through the shared bus.

Usage:
    event_bus.subscribe(UIEvent.DIALOG_STARTED, on_dialog_started)
    event_bus.publish(UIEvent.DIALOG_STARTED, target=npc, asset_id="HumanMale1_Intro")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
from weakref import WeakMethod, ref


logger = logging.getLogger(__name__)


class EngineEvent(Enum):
    """Built-in engine events."""
    GAME_PAUSE = auto()
    GAME_RESUME = auto()

    ENTITY_CREATED = auto()
    ENTITY_DESTROYED = auto()
    COMPONENT_ADDED = auto()
    COMPONENT_REMOVED = auto()


class UIEvent(Enum):
    """UI-facing events."""
    MENU_OPENED = auto()
    MENU_CLOSED = auto()
    DIALOG_STARTED = auto()
    DIALOG_ENDED = auto()
    SELECTION_CHANGED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
        consumed: Whether the event has been handled
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for publish/subscribe messaging.

    Features:
    - Typed events (Enum-based)
    - Priority ordering
    - Weak references (auto-cleanup when handlers are deleted)
    - One-shot handlers
    - Event consumption (stops propagation)

    Events published from inside a handler are queued and dispatched
    once the current dispatch finishes, so handlers always observe
    events in publish order.
    """

    def __init__(self):
        # event type -> list of (priority, handler ref, one_shot)
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
            weak: If True, hold only a weak reference to the handler
        """
        if weak:
            handler_ref = WeakMethod(handler) if hasattr(handler, '__self__') else ref(handler)
        else:
            handler_ref = handler

        handlers = self._handlers.setdefault(event_type, [])

        # Insert after every handler of equal or higher priority
        insert_idx = len(handlers)
        for i, (p, _, _) in enumerate(handlers):
            if priority > p:
                insert_idx = i
                break

        handlers.insert(insert_idx, (priority, handler_ref, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler from an event type."""
        if event_type not in self._handlers:
            return

        self._handlers[event_type] = [
            (p, h, o) for p, h, o in self._handlers[event_type]
            if self._get_handler(h) != handler
        ]

    def has_subscribers(self, event_type: Enum) -> bool:
        """Check whether any live handler listens for an event type."""
        return any(
            self._get_handler(h) is not None
            for _, h, _ in self._handlers.get(event_type, ())
        )

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Args:
            event_type: The event type
            **data: Event data as keyword arguments

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)

        if self._is_publishing:
            self._event_queue.append(event)
        else:
            self._dispatch(event)

        return event

    def clear(self, event_type: Enum | None = None) -> None:
        """
        Clear handlers.

        Args:
            event_type: If given, only clear handlers for this type.
        """
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def _dispatch(self, event: Event) -> None:
        handlers = self._handlers.get(event.type)
        if handlers:
            self._is_publishing = True
            to_remove = []

            try:
                for i, (_, handler_ref, one_shot) in enumerate(list(handlers)):
                    handler = self._get_handler(handler_ref)

                    if handler is None:
                        to_remove.append(handler_ref)
                        continue

                    try:
                        handler(event)
                    except Exception:
                        logger.exception(f"Error in event handler for {event.type}")

                    if one_shot:
                        to_remove.append(handler_ref)

                    if event.consumed:
                        break
            finally:
                self._handlers[event.type] = [
                    entry for entry in self._handlers.get(event.type, [])
                    if entry[1] not in to_remove
                ]
                self._is_publishing = False

        while self._event_queue and not self._is_publishing:
            self._dispatch(self._event_queue.pop(0))

    def _get_handler(self, handler_ref: Any) -> EventHandler | None:
        """Resolve handler from a strong or weak reference."""
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
