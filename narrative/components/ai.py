"""
AI components - autonomous behavior state of NPCs.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional

from engine.core.component import Component


class AIState(Enum):
    """AI behavior states."""
    IDLE = auto()
    WANDER = auto()
    WORK = auto()
    FLEE = auto()
    CONVERSATION = auto()
    SCRIPTED = auto()


class AIController(Component):
    """
    AI behavior controller.

    While a conversation is running the NPC holds still in the
    CONVERSATION state; its previous state is restored afterwards.

    Attributes:
        state: Current AI state
        resume_state: State to return to after a conversation
        move_speed: Movement speed
        think_interval: Time between AI decisions
        think_timer: Current think timer
    """
    state: AIState = AIState.IDLE
    resume_state: Optional[AIState] = None
    move_speed: float = 50.0
    think_interval: float = 0.5
    think_timer: float = 0.0

    @property
    def in_conversation(self) -> bool:
        return self.state == AIState.CONVERSATION

    def should_think(self, dt: float) -> bool:
        """Check if AI should make a decision this frame."""
        if self.in_conversation:
            return False
        self.think_timer -= dt
        if self.think_timer <= 0:
            self.think_timer = self.think_interval
            return True
        return False

    def enter_conversation(self) -> None:
        """Suspend autonomous behavior."""
        if self.in_conversation:
            return
        self.resume_state = self.state
        self.state = AIState.CONVERSATION

    def leave_conversation(self) -> None:
        """Restore the state held before the conversation."""
        if not self.in_conversation:
            return
        self.state = self.resume_state or AIState.IDLE
        self.resume_state = None
