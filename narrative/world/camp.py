"""
Camp roster - who lives in the player's camp.
"""

from __future__ import annotations

import logging
from enum import Enum, auto

from engine.core import World
from narrative.components import SettlerProfile
from narrative.world.npc import EntityConversationTarget


logger = logging.getLogger(__name__)


CAMP_TAG = "camp_member"


class CampEvent(Enum):
    """Camp membership events."""
    SETTLER_RECRUITED = auto()


class CampRoster:
    """
    Tracks camp membership and performs dialogue recruitment.

    Membership is the "camp_member" tag plus SettlerProfile.in_camp.
    """

    def __init__(self, world: World):
        self.world = world

    def total_npcs(self) -> int:
        """Number of settlers living in camp."""
        return self.world.count_with_tag(CAMP_TAG)

    def members(self) -> list[str]:
        return [entity.name for entity in self.world.get_entities_with_tag(CAMP_TAG)]

    def recruit(self, target, npc_name: str) -> bool:
        """
        Bring a conversation target into the camp.

        Args:
            target: Conversation target (must wrap a settler entity)
            npc_name: Name given by the dialogue option

        Returns:
            True if the target is now a camp member
        """
        if not isinstance(target, EntityConversationTarget):
            logger.warning(f"Cannot recruit '{npc_name}': target is not an entity")
            return False

        entity = target.entity
        profile = entity.try_get(SettlerProfile)
        if profile is None or not profile.recruitable:
            logger.warning(f"Cannot recruit '{npc_name}': {entity.name} is not a recruitable settler")
            return False

        if profile.in_camp:
            return True

        profile.in_camp = True
        entity.add_tag(CAMP_TAG)
        self.world.event_bus.publish(
            CampEvent.SETTLER_RECRUITED,
            entity=entity,
            npc_name=npc_name,
        )
        logger.info(f"{npc_name} joined the camp ({self.total_npcs()} settlers)")
        return True
