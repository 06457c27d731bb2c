"""Dialogue error types."""


class DialogueError(Exception):
    """Base class for dialogue failures."""


class DialogueUnavailable(DialogueError):
    """No usable dialogue asset could be found for a conversation."""

    def __init__(self, message: str, character_type=None):
        super().__init__(message)
        self.character_type = character_type


class DialogueAssetError(DialogueError):
    """A dialogue asset could not be parsed or failed validation."""

    def __init__(self, asset_id: str, reason: str):
        super().__init__(f"Invalid dialogue asset '{asset_id}': {reason}")
        self.asset_id = asset_id
        self.reason = reason
