"""
Input handler with action-based abstraction and control modes.

Translates raw pygame keyboard and gamepad events into semantic
Actions. The active ControlMode filters which actions game code can
see, so a conversation can freeze movement without the movement code
knowing anything about dialogue.

Usage:
    for event in pygame.event.get():
        input.process_event(event)
    input.update()

    if input.is_action_just_pressed(Action.CONFIRM):
        ...

    previous = input.set_control_mode(ControlMode.IN_CONVERSATION)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

import pygame

from engine.core.actions import (
    Action,
    ControlMode,
    MODE_ACTIONS,
    DEFAULT_KEY_BINDINGS,
    DEFAULT_GAMEPAD_BINDINGS,
    DEFAULT_GAMEPAD_HAT_BINDINGS,
)
from engine.core.events import EventBus


logger = logging.getLogger(__name__)


class InputEvent(Enum):
    """Input-specific events."""
    ACTION_PRESSED = "input.action_pressed"
    ACTION_RELEASED = "input.action_released"
    CONTROL_MODE_CHANGED = "input.control_mode_changed"
    GAMEPAD_CONNECTED = "input.gamepad_connected"
    GAMEPAD_DISCONNECTED = "input.gamepad_disconnected"


@dataclass
class InputState:
    """Complete input state for current frame."""
    actions_pressed: set[Action] = field(default_factory=set)
    actions_just_pressed: set[Action] = field(default_factory=set)
    actions_just_released: set[Action] = field(default_factory=set)

    keys_pressed: set[int] = field(default_factory=set)


class InputHandler:
    """
    Handles all input processing.

    Translates raw pygame events into semantic Actions and acts as the
    player's control-mode switch.
    """

    def __init__(
        self,
        event_bus: EventBus | None = None,
        control_mode: ControlMode = ControlMode.GAMEPLAY,
    ):
        self.event_bus = event_bus
        self._control_mode = control_mode

        self._state = InputState()
        self._prev_actions: set[Action] = set()

        # action -> keys, plus key -> actions for event lookup
        self._key_bindings = {a: list(keys) for a, keys in DEFAULT_KEY_BINDINGS.items()}
        self._reverse_key_bindings: dict[int, list[Action]] = {}
        self._rebuild_reverse_bindings()

        self._gamepads: dict[int, pygame.joystick.JoystickType] = {}
        self._gamepad_bindings = {a: list(b) for a, b in DEFAULT_GAMEPAD_BINDINGS.items()}
        self._gamepad_hat_bindings = DEFAULT_GAMEPAD_HAT_BINDINGS.copy()

        pygame.joystick.init()
        self._refresh_gamepads()

    def _rebuild_reverse_bindings(self) -> None:
        self._reverse_key_bindings.clear()
        for action, keys in self._key_bindings.items():
            for key in keys:
                self._reverse_key_bindings.setdefault(key, []).append(action)

    def _refresh_gamepads(self) -> None:
        self._gamepads.clear()
        for i in range(pygame.joystick.get_count()):
            joy = pygame.joystick.Joystick(i)
            joy.init()
            self._gamepads[joy.get_instance_id()] = joy

    # Control mode

    @property
    def control_mode(self) -> ControlMode:
        return self._control_mode

    def set_control_mode(self, mode: ControlMode) -> ControlMode:
        """
        Switch what the player's input drives.

        Held actions are released so nothing carries over between modes.

        Args:
            mode: The new control mode

        Returns:
            The mode that was active before the switch
        """
        previous = self._control_mode
        if mode == previous:
            return previous

        self._control_mode = mode
        self._state.actions_pressed.clear()
        self._state.keys_pressed.clear()
        self._prev_actions.clear()

        logger.debug(f"Control mode {previous.name} -> {mode.name}")
        if self.event_bus:
            self.event_bus.publish(
                InputEvent.CONTROL_MODE_CHANGED,
                mode=mode,
                previous=previous,
            )
        return previous

    def is_action_allowed(self, action: Action) -> bool:
        """Check whether the current control mode delivers an action."""
        return action in MODE_ACTIONS[self._control_mode]

    # Public API

    def is_action_pressed(self, action: Action) -> bool:
        """Check if an action is currently held down."""
        return self.is_action_allowed(action) and action in self._state.actions_pressed

    def is_action_just_pressed(self, action: Action) -> bool:
        """Check if an action was just pressed this frame."""
        return self.is_action_allowed(action) and action in self._state.actions_just_pressed

    def is_action_just_released(self, action: Action) -> bool:
        return self.is_action_allowed(action) and action in self._state.actions_just_released

    def get_menu_direction(self) -> int:
        """
        Get vertical menu navigation (just pressed).

        Returns:
            -1 for up, 1 for down, 0 for none
        """
        if self.is_action_just_pressed(Action.MENU_UP):
            return -1
        if self.is_action_just_pressed(Action.MENU_DOWN):
            return 1
        return 0

    def press_action(self, action: Action) -> None:
        """Inject a pressed action (scripted input, tests)."""
        self._state.actions_pressed.add(action)

    def release_action(self, action: Action) -> None:
        self._state.actions_pressed.discard(action)

    # Key binding management

    def bind_key(self, action: Action, key: int) -> None:
        """Add a key binding for an action."""
        keys = self._key_bindings.setdefault(action, [])
        if key not in keys:
            keys.append(key)
        self._rebuild_reverse_bindings()

    def unbind_key(self, action: Action, key: int) -> None:
        """Remove a key binding for an action."""
        if key in self._key_bindings.get(action, []):
            self._key_bindings[action].remove(key)
        self._rebuild_reverse_bindings()

    def get_bindings(self, action: Action) -> list[int]:
        """Get all key bindings for an action."""
        return self._key_bindings.get(action, []).copy()

    # Frame update

    def process_event(self, event: pygame.event.Event) -> None:
        """Process a pygame event."""
        if event.type == pygame.KEYDOWN:
            self._on_key_down(event.key)

        elif event.type == pygame.KEYUP:
            self._on_key_up(event.key)

        elif event.type == pygame.JOYDEVICEADDED:
            self._refresh_gamepads()
            if self.event_bus:
                self.event_bus.publish(InputEvent.GAMEPAD_CONNECTED)

        elif event.type == pygame.JOYDEVICEREMOVED:
            self._refresh_gamepads()
            if self.event_bus:
                self.event_bus.publish(InputEvent.GAMEPAD_DISCONNECTED)

        elif event.type == pygame.JOYBUTTONDOWN:
            for action, buttons in self._gamepad_bindings.items():
                if event.button in buttons:
                    self._state.actions_pressed.add(action)

        elif event.type == pygame.JOYBUTTONUP:
            for action, buttons in self._gamepad_bindings.items():
                if event.button in buttons:
                    self._state.actions_pressed.discard(action)

        elif event.type == pygame.JOYHATMOTION:
            self._on_hat_motion(event.value)

    def update(self) -> None:
        """
        Update input state for new frame.

        Call this once per fixed update, after processing events.
        """
        self._state.actions_just_pressed = self._state.actions_pressed - self._prev_actions
        self._state.actions_just_released = self._prev_actions - self._state.actions_pressed

        if self.event_bus:
            for action in self._state.actions_just_pressed:
                if self.is_action_allowed(action):
                    self.event_bus.publish(InputEvent.ACTION_PRESSED, action=action)
            for action in self._state.actions_just_released:
                if self.is_action_allowed(action):
                    self.event_bus.publish(InputEvent.ACTION_RELEASED, action=action)

        self._prev_actions = self._state.actions_pressed.copy()

    def _on_key_down(self, key: int) -> None:
        self._state.keys_pressed.add(key)
        for action in self._reverse_key_bindings.get(key, ()):
            self._state.actions_pressed.add(action)

    def _on_key_up(self, key: int) -> None:
        self._state.keys_pressed.discard(key)

        # Keep the action held if another bound key is still down
        for action in self._reverse_key_bindings.get(key, ()):
            still_pressed = any(
                other != key and other in self._state.keys_pressed
                for other in self._key_bindings.get(action, [])
            )
            if not still_pressed:
                self._state.actions_pressed.discard(action)

    def _on_hat_motion(self, value: tuple[int, int]) -> None:
        for action in self._gamepad_hat_bindings.values():
            self._state.actions_pressed.discard(action)

        if value in self._gamepad_hat_bindings:
            self._state.actions_pressed.add(self._gamepad_hat_bindings[value])
