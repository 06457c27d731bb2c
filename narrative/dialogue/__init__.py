"""
Dialogue - asset loading, selection and conversation sessions.

Quick Start:
    loader = DialogueLoader("data/dialogue/camp")
    manager = NarrativeManager(config, event_bus, loader=loader)
    manager.start_conversation(target, CharacterType.HUMAN_MALE_1, flags)
"""

from narrative.dialogue.errors import DialogueError, DialogueUnavailable, DialogueAssetError
from narrative.dialogue.models import (
    DialogueAsset,
    DialogueLine,
    DialogueOption,
    InventoryRequirement,
    ConditionalStart,
)
from narrative.dialogue.conditions import FlagContext, check_conditions, conditions_met
from narrative.dialogue.variables import VariableContext, substitute_variables, npc_display_name
from narrative.dialogue.inventory_gate import InventoryGate
from narrative.dialogue.loader import DialogueLoader
from narrative.dialogue.selector import DialogueSelector
from narrative.dialogue.session import (
    ConversationSession,
    SessionState,
    Continuation,
    ResolvedLine,
    ResolvedOption,
)
from narrative.dialogue.manager import NarrativeManager

__all__ = [
    # Errors
    "DialogueError",
    "DialogueUnavailable",
    "DialogueAssetError",
    # Data
    "DialogueAsset",
    "DialogueLine",
    "DialogueOption",
    "InventoryRequirement",
    "ConditionalStart",
    # Evaluation
    "FlagContext",
    "check_conditions",
    "conditions_met",
    "VariableContext",
    "substitute_variables",
    "npc_display_name",
    "InventoryGate",
    # Assets
    "DialogueLoader",
    "DialogueSelector",
    # Conversations
    "ConversationSession",
    "SessionState",
    "Continuation",
    "ResolvedLine",
    "ResolvedOption",
    "NarrativeManager",
]
