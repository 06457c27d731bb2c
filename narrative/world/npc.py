"""
NPC entities - factories and the conversation target adapter.
"""

from __future__ import annotations

from typing import Optional

from engine.core import Entity, World
from narrative.components import (
    AIController,
    AIState,
    CharacterType,
    NarrativeFlags,
    NarrativeInteractive,
    SettlerProfile,
    TaskType,
)


UNKNOWN_SETTLER = "Unknown Settler"

JOB_NAMES: dict[TaskType, str] = {
    TaskType.WANDER: "Wandering",
    TaskType.WORK: "Working",
    TaskType.ATTACK: "Attacking",
    TaskType.EAT: "Eating",
    TaskType.FLEE: "Fleeing",
    TaskType.SHELTERED: "Sheltered",
}

_TASK_STATES: dict[TaskType, AIState] = {
    TaskType.WANDER: AIState.WANDER,
    TaskType.WORK: AIState.WORK,
    TaskType.FLEE: AIState.FLEE,
}


def job_name(task: TaskType) -> str:
    """Display name of a settler task ("Idle" for anything unlisted)."""
    return JOB_NAMES.get(task, "Idle")


def create_npc(
    world: World,
    name: str,
    character_type: CharacterType,
    dialogue_asset: Optional[str] = None,
) -> Entity:
    """
    Create an NPC the player can talk to.

    Args:
        world: World to add NPC to
        name: Entity name
        character_type: Category used to select dialogue
        dialogue_asset: Specific asset id instead of category selection

    Returns:
        The created NPC entity
    """
    npc = world.create_entity(name)
    npc.add_tag("npc")
    npc.add(NarrativeFlags())
    npc.add(NarrativeInteractive(
        character_type=character_type,
        dialogue_asset=dialogue_asset,
        prompt_text=f"Talk to {name}",
    ))
    npc.add(AIController())
    return npc


def create_settler(
    world: World,
    settler_name: str,
    character_type: CharacterType = CharacterType.HUMAN_MALE_1,
    age: Optional[int] = None,
    description: str = "",
    task: TaskType = TaskType.WANDER,
    recruitable: bool = True,
) -> Entity:
    """
    Create a settler NPC.

    The entity is named "Settler_<name>" as placed in the camp scene.
    """
    npc = create_npc(world, f"Settler_{settler_name.replace(' ', '_')}", character_type)
    npc.add_tag("settler")
    npc.add(SettlerProfile(
        settler_name=settler_name,
        age=age,
        description=description,
        current_task=task,
        recruitable=recruitable,
    ))
    npc.get(AIController).state = _TASK_STATES.get(task, AIState.IDLE)
    return npc


class EntityConversationTarget:
    """
    Conversation target backed by an NPC entity.

    Pauses the NPC's AI while talking and exposes its settler data to
    dialogue variables.
    """

    def __init__(self, entity: Entity):
        self.entity = entity

    @property
    def name(self) -> str:
        return self.entity.name

    @property
    def profile(self) -> Optional[SettlerProfile]:
        return self.entity.try_get(SettlerProfile)

    @property
    def flag_store(self) -> Optional[NarrativeFlags]:
        return self.entity.try_get(NarrativeFlags)

    def pause_for_conversation(self) -> None:
        ai = self.entity.try_get(AIController)
        if ai:
            ai.enter_conversation()

    def resume_after_conversation(self) -> None:
        ai = self.entity.try_get(AIController)
        if ai:
            ai.leave_conversation()

    def settler_name(self) -> Optional[str]:
        profile = self.profile
        if profile and profile.settler_name and profile.settler_name != UNKNOWN_SETTLER:
            return profile.settler_name
        return None

    def age(self) -> Optional[int]:
        return self.profile.age if self.profile else None

    def description(self) -> Optional[str]:
        return self.profile.description if self.profile else None

    def current_job(self) -> Optional[str]:
        """Job name of a settler; None for NPCs that are not settlers."""
        profile = self.profile
        if profile is None:
            return None
        return job_name(profile.current_task)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EntityConversationTarget):
            return self.entity == other.entity
        return False

    def __hash__(self) -> int:
        return hash(self.entity)

    def __repr__(self) -> str:
        return f"EntityConversationTarget({self.entity.name})"
