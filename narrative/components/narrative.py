"""
Narrative components - flags, conversation participants, settlers.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional

from pydantic import Field

from engine.core.component import Component


class CharacterType(Enum):
    """Character category used to pick dialogue for an NPC."""
    NONE = auto()
    HUMAN_MALE_1 = auto()
    HUMAN_MALE_2 = auto()
    HUMAN_FEMALE_1 = auto()
    HUMAN_FEMALE_2 = auto()
    ZOMBIE_MELEE = auto()
    ZOMBIE_SPITTER = auto()
    ZOMBIE_TANK = auto()
    MACHINE_DRONE = auto()
    MACHINE_TURRET_BASE_TARGET = auto()
    MACHINE_ROBOT = auto()
    BOSS_1 = auto()
    BOSS_2 = auto()
    BOSS_3 = auto()


class TaskType(Enum):
    """What a settler is currently doing in camp."""
    NONE = auto()
    WANDER = auto()
    WORK = auto()
    ATTACK = auto()
    EAT = auto()
    FLEE = auto()
    SHELTERED = auto()
    SLEEP = auto()


class NarrativeFlags(Component):
    """
    Per-character flag store.

    Flags are named facts set and cleared by dialogue content. The value
    is carried for save data but never interpreted; a flag counts as set
    while its name is present.

    Attributes:
        flags: Flag name to value
    """
    flags: dict[str, str] = Field(default_factory=dict)

    def has_flag(self, name: str) -> bool:
        return bool(name) and name in self.flags

    def set_flag(self, name: str, value: str = "true") -> None:
        if name:
            self.flags[name] = value

    def remove_flag(self, name: str) -> None:
        self.flags.pop(name, None)

    def get_flag(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.flags.get(name, default)


class NarrativeInteractive(Component):
    """
    Makes an entity someone the player can talk to.

    Attributes:
        character_type: Category used to select dialogue
        dialogue_asset: Specific asset id, bypassing category selection
        prompt_text: Interaction prompt shown near the NPC
    """
    character_type: CharacterType = CharacterType.NONE
    dialogue_asset: Optional[str] = None
    prompt_text: str = "Talk"


class SettlerProfile(Component):
    """
    Personal data of a camp settler.

    Attributes:
        settler_name: Display name ("" when not yet generated)
        age: Age in years
        description: Short biography
        current_task: Task the settler is working on
        recruitable: Whether dialogue can recruit this settler
        in_camp: Whether the settler has joined the player's camp
    """
    settler_name: str = ""
    age: Optional[int] = None
    description: str = ""
    current_task: TaskType = TaskType.NONE
    recruitable: bool = True
    in_camp: bool = False
