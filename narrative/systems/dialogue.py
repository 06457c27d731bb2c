"""
Dialogue system - conversation UI state and input.

Acts as the presenter for the narrative manager: resolved lines are
written into the DialogueView component, and menu input is translated
into option selection, continuing and closing.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from engine.core.actions import Action
from engine.core.system import System
from narrative.components import DialogueView, NarrativeFlags, NarrativeInteractive
from narrative.dialogue.errors import DialogueUnavailable
from narrative.dialogue.session import Continuation, ResolvedLine
from narrative.world.npc import EntityConversationTarget

if TYPE_CHECKING:
    from engine.core.entity import Entity
    from engine.core.world import World
    from engine.input.handler import InputHandler
    from narrative.dialogue.manager import NarrativeManager


logger = logging.getLogger(__name__)


class DialogueEvent(Enum):
    """Dialogue presentation events."""
    LINE_DISPLAYED = auto()
    OPTION_SELECTED = auto()
    OPTION_REFUSED = auto()


class DialogueSystem(System):
    """
    Drives the conversation box.

    Usage:
        dialogue_system = DialogueSystem(manager, input_handler)
        world.add_system(dialogue_system)

        # Player pressed interact next to an NPC
        dialogue_system.interact_with_speaker(npc)
    """

    required_components = [DialogueView]
    priority = 10

    def __init__(self, manager: NarrativeManager, input_handler: Optional[InputHandler] = None):
        super().__init__()
        self.manager = manager
        self.input_handler = input_handler
        self.event_bus = manager.event_bus
        self._view_entity: Optional[Entity] = None

        manager.presenter = self

    def on_add(self, world: World) -> None:
        super().on_add(world)
        existing = next(iter(world.get_entities_with(DialogueView)), None)
        if existing is None:
            existing = world.create_entity("DialogueUI")
            existing.add(DialogueView())
        self._view_entity = existing

    @property
    def view(self) -> Optional[DialogueView]:
        if self._view_entity is None:
            return None
        return self._view_entity.try_get(DialogueView)

    # Presenter

    def display(self, line: ResolvedLine) -> None:
        """Show a resolved line."""
        view = self.view
        if view is not None:
            view.show(line)

        self.event_bus.publish(
            DialogueEvent.LINE_DISPLAYED,
            line_id=line.line_id,
            speaker=line.speaker,
            text=line.text,
        )

    def close(self) -> None:
        """Hide the conversation box."""
        view = self.view
        if view is not None:
            view.hide()

    # Player actions

    def confirm(self) -> bool:
        """
        Act on the displayed line: choose the highlighted option, or
        continue/close a line without options.

        Returns:
            True if the conversation is still running
        """
        session = self.manager.session
        view = self.view
        if session is None or view is None or view.line is None:
            return False

        if view.line.continuation != Continuation.OPTIONS:
            return session.proceed()

        option = view.selected_option
        if option is None:
            return True

        if not option.available:
            self.event_bus.publish(
                DialogueEvent.OPTION_REFUSED,
                index=option.index,
                cost_text=option.cost_text,
            )
            return True

        self.event_bus.publish(
            DialogueEvent.OPTION_SELECTED,
            index=option.index,
            text=option.text,
        )
        return session.select_option(option)

    def handle_input(self) -> bool:
        """
        Handle dialogue input.

        Returns:
            True if input was consumed
        """
        if self.input_handler is None or not self.manager.is_active:
            return False

        view = self.view
        if view is None:
            return False

        if self.input_handler.is_action_just_pressed(Action.CONFIRM):
            self.confirm()
            return True

        if self.input_handler.is_action_just_pressed(Action.CANCEL):
            self.manager.end_conversation()
            return True

        direction = self.input_handler.get_menu_direction()
        if direction < 0:
            view.select_prev()
            return True
        if direction > 0:
            view.select_next()
            return True

        return False

    # Speaker interaction

    def interact_with_speaker(self, speaker: Entity) -> bool:
        """
        Start a conversation with an NPC.

        Args:
            speaker: Entity with NarrativeInteractive component

        Returns:
            True if a conversation started
        """
        interactive = speaker.try_get(NarrativeInteractive)
        if interactive is None:
            return False

        target = EntityConversationTarget(speaker)
        flags = speaker.try_get(NarrativeFlags)

        try:
            if interactive.dialogue_asset:
                self.manager.start_conversation_with_asset(
                    interactive.dialogue_asset, target, flags
                )
            else:
                self.manager.start_conversation(target, interactive.character_type, flags)
        except DialogueUnavailable as e:
            logger.warning(f"Cannot talk to {speaker.name}: {e}")
            return False

        return self.manager.is_active

    # System update

    def process_entity(self, entity: Entity, dt: float) -> None:
        """Close views left open by a conversation that already ended."""
        view = entity.get(DialogueView)
        if view.is_open and not self.manager.is_active:
            view.hide()

    def update(self, dt: float) -> None:
        if not self.enabled:
            return

        self.handle_input()
        super().update(dt)
