"""
Narrative components - data attached to conversation participants.

All components are Pydantic models attached to entities.
"""

from engine.core.component import register_component

from narrative.components.narrative import (
    CharacterType,
    TaskType,
    NarrativeFlags,
    NarrativeInteractive,
    SettlerProfile,
)
from narrative.components.ai import AIController, AIState
from narrative.components.inventory import Inventory, ItemStack
from narrative.components.dialogue import DialogueView

for _component in (
    NarrativeFlags,
    NarrativeInteractive,
    SettlerProfile,
    AIController,
    Inventory,
    DialogueView,
):
    register_component(_component)

__all__ = [
    "CharacterType",
    "TaskType",
    "NarrativeFlags",
    "NarrativeInteractive",
    "SettlerProfile",
    "AIController",
    "AIState",
    "Inventory",
    "ItemStack",
    "DialogueView",
]
