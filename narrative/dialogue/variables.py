"""
Runtime variables in dialogue text.

Supported placeholders:
    {npcName} {npcAge} {npcDescription} {npcJob}
    {playerName} {campName} {totalNPCs}

Each placeholder is resolved only when it occurs in the text, and
missing data resolves to a fixed fallback, so resolved text never
contains a known placeholder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from narrative.dialogue.models import DialogueLine

if TYPE_CHECKING:
    from narrative.dialogue.session import ConversationTarget


UNKNOWN_NPC = "Unknown NPC"
UNKNOWN = "Unknown"
SETTLER_PREFIX = "Settler_"

PLACEHOLDERS = (
    "npcName",
    "npcAge",
    "npcDescription",
    "npcJob",
    "playerName",
    "campName",
    "totalNPCs",
)


@dataclass
class VariableContext:
    """
    Data available to placeholders during one conversation.

    Attributes:
        target: Conversation target, if any
        player_name: Value of {playerName}
        camp_name: Value of {campName}
        total_npcs: Callable returning the camp headcount
    """
    target: Optional[ConversationTarget] = None
    player_name: str = "Player"
    camp_name: str = "Camp"
    total_npcs: Optional[Callable[[], int]] = None


def npc_display_name(target: Optional[ConversationTarget]) -> str:
    """
    Name shown for a conversation target.

    Uses the settler name when known, otherwise the entity name with
    any "Settler_" prefix removed.
    """
    if target is None:
        return UNKNOWN_NPC

    settler_name = target.settler_name()
    if settler_name:
        return settler_name

    name = target.name
    if not name:
        return UNKNOWN_NPC
    if name.startswith(SETTLER_PREFIX):
        return name[len(SETTLER_PREFIX):] or UNKNOWN_NPC
    return name


def _or_unknown(value) -> str:
    return UNKNOWN if value is None or value == "" else str(value)


def _resolvers(context: VariableContext) -> dict[str, Callable[[], str]]:
    target = context.target
    return {
        "npcName": lambda: npc_display_name(target),
        "npcAge": lambda: _or_unknown(target.age() if target else None),
        "npcDescription": lambda: _or_unknown(target.description() if target else None),
        "npcJob": lambda: _or_unknown(target.current_job() if target else None),
        "playerName": lambda: context.player_name or "Player",
        "campName": lambda: context.camp_name or "Camp",
        "totalNPCs": lambda: str(context.total_npcs() if context.total_npcs else 0),
    }


def substitute_variables(text: str, context: VariableContext) -> str:
    """
    Replace known placeholders in a template string.

    Args:
        text: Template text
        context: Conversation data

    Returns:
        Text with every known placeholder replaced
    """
    if not text or "{" not in text:
        return text

    for key, resolve in _resolvers(context).items():
        token = "{" + key + "}"
        if token in text:
            text = text.replace(token, resolve())
    return text


def resolve_line(line: DialogueLine, context: VariableContext) -> DialogueLine:
    """
    Return a display copy of a line with variables substituted into
    its text and its options' text. The original line is untouched.
    """
    return line.model_copy(update={
        "text": substitute_variables(line.text, context),
        "options": tuple(
            option.model_copy(update={"text": substitute_variables(option.text, context)})
            for option in line.options
        ),
    })
