"""
Narrative world - NPCs, the camp roster and global progression.
"""

from narrative.world.npc import create_npc, create_settler, job_name, EntityConversationTarget
from narrative.world.camp import CampRoster, CampEvent, CAMP_TAG
from narrative.world.progression import ProgressionFlags, ProgressionEvent

__all__ = [
    "create_npc",
    "create_settler",
    "job_name",
    "EntityConversationTarget",
    "CampRoster",
    "CampEvent",
    "CAMP_TAG",
    "ProgressionFlags",
    "ProgressionEvent",
]
