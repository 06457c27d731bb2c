import os
import sys
import json
import random
import pytest
from unittest.mock import MagicMock, patch

# Ensure engine and narrative modules can be imported
sys.path.append(os.getcwd())

@pytest.fixture(autouse=True)
def mock_pygame():
    """
    Global mock for pygame to allow headless testing.
    Autoused for all tests to prevent accidental window creation.
    """
    with patch('pygame.init'), \
         patch('pygame.display'), \
         patch('pygame.event'), \
         patch('pygame.time'), \
         patch('pygame.joystick'), \
         patch('pygame.key'):

        import pygame
        pygame.time.get_ticks = MagicMock(return_value=0)
        pygame.joystick.get_count = MagicMock(return_value=0)

        yield

@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from engine.core.events import EventBus
    return EventBus()

@pytest.fixture
def world(event_bus):
    """Fresh World for each test."""
    from engine.core.world import World
    return World(event_bus)

@pytest.fixture
def input_handler(event_bus):
    from engine.input.handler import InputHandler
    return InputHandler(event_bus)

@pytest.fixture
def rng():
    """Seeded random source for repeatable selection."""
    return random.Random(1234)

@pytest.fixture
def dialogue_dir(tmp_path):
    """
    Empty dialogue directory. Use write_asset to populate it.
    """
    path = tmp_path / "dialogue"
    path.mkdir()
    return path

@pytest.fixture
def write_asset(dialogue_dir):
    """Write a dialogue asset file (dict is dumped as JSON, str written raw)."""
    def _write(asset_id, data):
        text = data if isinstance(data, str) else json.dumps(data)
        (dialogue_dir / f"{asset_id}.json").write_text(text, encoding="utf-8")
        return dialogue_dir / f"{asset_id}.json"
    return _write

@pytest.fixture
def loader(dialogue_dir):
    from narrative.dialogue.loader import DialogueLoader
    return DialogueLoader(dialogue_dir)

@pytest.fixture
def simple_asset_data():
    """Start -> (Ask | Leave), Ask -> Done."""
    return {
        "startingLineId": "Start",
        "lines": [
            {
                "id": "Start",
                "speaker": "Mara",
                "text": "Hello {playerName}.",
                "options": [
                    {"text": "Ask", "nextLine": "Ask"},
                    {"text": "Leave", "nextLine": "Leave"},
                ],
            },
            {"id": "Ask", "text": "Ask away.", "nextLine": "Done"},
            {"id": "Done", "text": "That's all.", "isTerminal": True},
            {"id": "Leave", "text": "Bye.", "isTerminal": True},
        ],
    }

@pytest.fixture
def make_asset():
    """Build a DialogueAsset straight from camelCase data."""
    from narrative.dialogue.models import DialogueAsset
    def _make(data, asset_id="Test"):
        return DialogueAsset.model_validate({**data, "assetId": asset_id})
    return _make

class FakeTarget:
    """Conversation target that records pause/resume calls."""

    def __init__(self, name="Settler_Mara", settler=None, age=None, description=None, job=None):
        self.name = name
        self._settler = settler
        self._age = age
        self._description = description
        self._job = job
        self.paused = 0
        self.resumed = 0

    def pause_for_conversation(self):
        self.paused += 1

    def resume_after_conversation(self):
        self.resumed += 1

    def settler_name(self):
        return self._settler

    def age(self):
        return self._age

    def description(self):
        return self._description

    def current_job(self):
        return self._job

class FakeControls:
    """Control-mode switch that records every mode set."""

    def __init__(self):
        from engine.core.actions import ControlMode
        self.mode = ControlMode.GAMEPLAY
        self.history = []

    def set_control_mode(self, mode):
        previous = self.mode
        self.mode = mode
        self.history.append(mode)
        return previous

class FakePresenter:
    def __init__(self):
        self.shown = []
        self.closed = 0

    def display(self, line):
        self.shown.append(line)

    def close(self):
        self.closed += 1

class FakeInventory:
    """Item container backed by a dict of name -> count."""

    def __init__(self, **items):
        self.items = {name.replace("_", " "): count for name, count in items.items()}
        self.removed = []

    def has_item(self, name, quantity=1):
        return self.items.get(name, 0) >= quantity

    def count_item(self, name):
        return self.items.get(name, 0)

    def remove_item(self, name, quantity=1):
        taken = min(quantity, self.items.get(name, 0))
        self.items[name] = self.items.get(name, 0) - taken
        self.removed.append((name, taken))
        return taken

@pytest.fixture
def target():
    return FakeTarget()

@pytest.fixture
def controls():
    return FakeControls()

@pytest.fixture
def presenter():
    return FakePresenter()

@pytest.fixture
def fake_inventory():
    return FakeInventory

@pytest.fixture
def make_target():
    return FakeTarget
