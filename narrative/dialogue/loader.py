"""
Dialogue asset loading.

Reads dialogue JSON files from a directory, validates them against the
bundled JSON schema and builds immutable DialogueAsset models. Parsed
assets are cached by id; a file that fails to parse is reported in the
log and loads as None.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema
from pydantic import ValidationError

from narrative.dialogue.errors import DialogueAssetError
from narrative.dialogue.models import DialogueAsset


SCHEMA_PATH = Path(__file__).parent / "schemas" / "dialogue.schema.json"


class DialogueLoader:
    """
    Loads dialogue assets by id (file stem) from a directory.

    Usage:
        loader = DialogueLoader("data/dialogue/camp")
        asset = loader.load_asset("HumanMale1_Intro")
        ids = loader.find_by_prefix("humanmale")
    """

    def __init__(self, dialogue_path: Path | str, schema_path: Path | str = SCHEMA_PATH):
        self._dialogue_path = Path(dialogue_path)
        self._schema_path = Path(schema_path)
        self._schema: dict[str, Any] | None = None
        self._cache: dict[str, DialogueAsset] = {}

        self.logger = logging.getLogger(__name__)

    @property
    def dialogue_path(self) -> Path:
        return self._dialogue_path

    def _load_schema(self) -> dict[str, Any]:
        if self._schema is None:
            with open(self._schema_path, 'r', encoding='utf-8') as f:
                self._schema = json.load(f)
        return self._schema

    def available_ids(self) -> list[str]:
        """Ids of every dialogue file in the directory, sorted."""
        if not self._dialogue_path.exists():
            self.logger.warning(f"Dialogue directory not found: {self._dialogue_path}")
            return []
        return sorted(p.stem for p in self._dialogue_path.glob("*.json"))

    def find_by_prefix(self, prefix: str) -> list[str]:
        """Ids whose name starts with a prefix (case-insensitive)."""
        prefix = prefix.lower()
        return [asset_id for asset_id in self.available_ids() if asset_id.lower().startswith(prefix)]

    def exists(self, asset_id: str) -> bool:
        return asset_id in self._cache or self._path_for(asset_id).exists()

    def _path_for(self, asset_id: str) -> Path:
        return self._dialogue_path / f"{asset_id}.json"

    def load_asset(self, asset_id: str) -> DialogueAsset | None:
        """
        Load a dialogue asset.

        Args:
            asset_id: File stem of the dialogue JSON

        Returns:
            The asset, or None if it is missing or malformed
        """
        if asset_id in self._cache:
            return self._cache[asset_id]

        try:
            asset = self.parse(asset_id, self._read(asset_id))
        except DialogueAssetError as e:
            self.logger.error(str(e))
            return None

        self._cache[asset_id] = asset
        return asset

    def _read(self, asset_id: str) -> Any:
        path = self._path_for(asset_id)
        if not path.exists():
            raise DialogueAssetError(asset_id, f"file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise DialogueAssetError(asset_id, f"invalid JSON: {e}") from e
        except OSError as e:
            raise DialogueAssetError(asset_id, f"unreadable: {e}") from e

    def parse(self, asset_id: str, data: Any) -> DialogueAsset:
        """
        Validate raw JSON data and build an asset.

        Raises:
            DialogueAssetError: If the data fails schema or model validation
        """
        try:
            jsonschema.validate(instance=data, schema=self._load_schema())
        except jsonschema.ValidationError as e:
            location = "/".join(str(p) for p in e.absolute_path) or "<root>"
            raise DialogueAssetError(asset_id, f"{location}: {e.message}") from e

        try:
            asset = DialogueAsset.model_validate(data)
        except ValidationError as e:
            raise DialogueAssetError(asset_id, str(e)) from e

        return asset.model_copy(update={"asset_id": asset_id})

    def load_all(self) -> dict[str, DialogueAsset]:
        """Load every asset in the directory, skipping malformed ones."""
        assets = {}
        for asset_id in self.available_ids():
            asset = self.load_asset(asset_id)
            if asset is not None:
                assets[asset_id] = asset

        self.logger.info(f"Loaded {len(assets)} dialogue assets from {self._dialogue_path}")
        return assets

    def clear_cache(self) -> None:
        self._cache.clear()
