"""
Dialogue asset selection by character category.

Candidates for a category come from the first source that yields a
loadable asset:

1. Explicitly configured asset ids for the category
2. Files named after the category (``HumanMale1*``)
3. Broader fallback names (``HumanMale*``, ``Human*``, ``Recruitment*``)
4. The universal fallback asset

Among candidates, assets with a conditional start that currently holds
are preferred; the choice within the preferred group is uniformly
random.
"""

from __future__ import annotations

import logging
import random
from typing import Iterable, Optional

from narrative.components.narrative import CharacterType
from narrative.dialogue.conditions import FlagLookup, conditions_met
from narrative.dialogue.errors import DialogueUnavailable
from narrative.dialogue.loader import DialogueLoader
from narrative.dialogue.models import DialogueAsset


logger = logging.getLogger(__name__)


DEFAULT_FALLBACK_ASSET = "_TestDialogue"

NAME_PATTERNS: dict[CharacterType, str] = {
    CharacterType.HUMAN_MALE_1: "HumanMale1",
    CharacterType.HUMAN_FEMALE_1: "HumanFemale1",
    CharacterType.HUMAN_MALE_2: "HumanMale2",
    CharacterType.HUMAN_FEMALE_2: "HumanFemale2",
    CharacterType.MACHINE_ROBOT: "MachineRobot",
    CharacterType.MACHINE_DRONE: "MachineDrone",
    CharacterType.ZOMBIE_MELEE: "ZombieMelee",
    CharacterType.ZOMBIE_SPITTER: "ZombieSpitter",
    CharacterType.ZOMBIE_TANK: "ZombieTank",
}

_MALE = (CharacterType.HUMAN_MALE_1, CharacterType.HUMAN_MALE_2)
_FEMALE = (CharacterType.HUMAN_FEMALE_1, CharacterType.HUMAN_FEMALE_2)
_MACHINE = (
    CharacterType.MACHINE_DRONE,
    CharacterType.MACHINE_ROBOT,
    CharacterType.MACHINE_TURRET_BASE_TARGET,
)
_ZOMBIE = (
    CharacterType.ZOMBIE_MELEE,
    CharacterType.ZOMBIE_SPITTER,
    CharacterType.ZOMBIE_TANK,
)


def fallback_patterns(character_type: CharacterType) -> tuple[str, ...]:
    """Broader name prefixes tried when no file matches the category."""
    if character_type in _MALE:
        return ("HumanMale", "Human", "Recruitment")
    if character_type in _FEMALE:
        return ("HumanFemale", "Human", "Recruitment")
    if character_type in _MACHINE:
        return ("Machine", "Robot", "Mechanical")
    if character_type in _ZOMBIE:
        return ("Zombie", "Undead")
    return ("Recruitment", "Generic")


class DialogueSelector:
    """
    Picks a dialogue asset for a character category.

    Candidate lists are cached per category once non-empty. Assets are
    immutable, so the cache never goes stale for a given directory.

    Attributes:
        loader: Asset source
        mappings: Configured asset ids per category
        fallback_asset: Universal fallback asset id
    """

    def __init__(
        self,
        loader: DialogueLoader,
        mappings: Optional[dict[CharacterType, list[str]]] = None,
        fallback_asset: str = DEFAULT_FALLBACK_ASSET,
        rng: Optional[random.Random] = None,
    ):
        self.loader = loader
        self.mappings = mappings or {}
        self.fallback_asset = fallback_asset
        self._rng = rng or random.Random()
        self._cache: dict[CharacterType, list[DialogueAsset]] = {}

    def candidates_for(self, character_type: CharacterType) -> list[DialogueAsset]:
        """
        Get every candidate asset for a category.

        Returns:
            Loaded candidates; empty when even the fallback asset is missing
        """
        if character_type in self._cache:
            return self._cache[character_type]

        candidates = self._discover(character_type)
        if candidates:
            self._cache[character_type] = candidates
            logger.info(
                f"Dialogue candidates for {character_type.name}: "
                f"{', '.join(a.asset_id for a in candidates)}"
            )
        else:
            logger.warning(f"No dialogue found for character type: {character_type.name}")
        return candidates

    def _discover(self, character_type: CharacterType) -> list[DialogueAsset]:
        configured = self._load(self.mappings.get(character_type, ()))
        if configured:
            return configured

        pattern = NAME_PATTERNS.get(character_type)
        if pattern is None:
            logger.warning(f"No name pattern for character type: {character_type.name}")
        else:
            matched = self._load(self.loader.find_by_prefix(pattern))
            if matched:
                return matched

            for fallback in fallback_patterns(character_type):
                matched = self._load(self.loader.find_by_prefix(fallback))
                if matched:
                    return matched

        return self._load([self.fallback_asset])

    def _load(self, asset_ids: Iterable[str]) -> list[DialogueAsset]:
        assets = []
        for asset_id in asset_ids:
            asset = self.loader.load_asset(asset_id)
            if asset is not None:
                assets.append(asset)
        return assets

    def select(
        self,
        character_type: CharacterType,
        has_flag: Optional[FlagLookup] = None,
    ) -> DialogueAsset:
        """
        Choose one asset for a category.

        Args:
            character_type: Category of the conversation target
            has_flag: Flag lookup of the target, or None if it has no flags

        Returns:
            The chosen asset

        Raises:
            DialogueUnavailable: If no candidate exists
        """
        candidates = self.candidates_for(character_type)
        if not candidates:
            raise DialogueUnavailable(
                f"No dialogue available for character type {character_type.name}",
                character_type=character_type,
            )

        if has_flag is None:
            return self._rng.choice(candidates)

        prioritized = []
        fallback = []
        for asset in candidates:
            # A start pointing at a missing line can never be taken
            line_ids = asset.build_line_index()
            if any(
                start.line_id in line_ids
                and conditions_met(start.required_flags, start.blocked_by_flags, has_flag)
                for start in asset.conditional_starts
            ):
                prioritized.append(asset)
            else:
                fallback.append(asset)

        return self._rng.choice(prioritized or fallback)

    def clear_cache(self) -> None:
        self._cache.clear()
