"""
Narrative configuration.

Usage:
    config = NarrativeConfig.load("data/narrative.json")
    setup_logging(config.log_level)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from narrative.components.narrative import CharacterType


class NarrativeConfig:
    """Configuration for the narrative layer."""

    def __init__(
        self,
        dialogue_path: str = "data/dialogue/camp",
        fallback_asset: str = "_TestDialogue",
        character_dialogue_mappings: Optional[dict[CharacterType, list[str]]] = None,
        player_name: str = "Player",
        camp_name: str = "Camp",
        debug_logging: bool = False,
        log_level: str = "INFO",
    ):
        self.dialogue_path = dialogue_path
        self.fallback_asset = fallback_asset
        self.character_dialogue_mappings = character_dialogue_mappings or {}
        self.player_name = player_name
        self.camp_name = camp_name
        self.debug_logging = debug_logging
        self.log_level = log_level

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NarrativeConfig:
        """
        Build a config from plain data.

        Mapping keys are CharacterType names ("HUMAN_MALE_1").

        Raises:
            ValueError: On unknown keys or character type names
        """
        data = dict(data)
        allowed = {
            "dialogue_path", "fallback_asset", "character_dialogue_mappings",
            "player_name", "camp_name", "debug_logging", "log_level",
        }
        unknown = set(data) - allowed
        if unknown:
            raise ValueError(f"Unknown narrative config keys: {', '.join(sorted(unknown))}")

        mappings = {}
        for type_name, asset_ids in (data.pop("character_dialogue_mappings", None) or {}).items():
            try:
                character_type = CharacterType[type_name]
            except KeyError:
                raise ValueError(f"Unknown character type in mappings: {type_name}") from None
            mappings[character_type] = list(asset_ids)

        return cls(character_dialogue_mappings=mappings, **data)

    @classmethod
    def load(cls, path: Path | str) -> NarrativeConfig:
        """Load a config from a JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            return cls.from_dict(json.load(f))


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for scripts and tools."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
