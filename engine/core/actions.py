"""
Input action and control mode definitions.

Actions abstract raw input (keys, buttons) into semantic actions.
Control modes decide which actions are live: walking around the camp
accepts movement, a conversation accepts only menu navigation.

Usage:
    previous = input.set_control_mode(ControlMode.IN_CONVERSATION)
    ...
    input.set_control_mode(previous)

    if input.is_action_just_pressed(Action.CONFIRM):
        ...
"""

from enum import Enum, auto

import pygame


class Action(Enum):
    """Semantic input actions."""

    # Menu navigation
    MENU_UP = auto()
    MENU_DOWN = auto()
    CONFIRM = auto()
    CANCEL = auto()
    MENU = auto()

    # Movement
    MOVE_UP = auto()
    MOVE_DOWN = auto()
    MOVE_LEFT = auto()
    MOVE_RIGHT = auto()

    # World interaction
    INTERACT = auto()
    ATTACK = auto()
    RUN = auto()

    # System
    PAUSE = auto()
    DEBUG_TOGGLE = auto()


class ControlMode(Enum):
    """What the player's input is currently driving."""
    GAMEPLAY = auto()
    IN_MENU = auto()
    IN_CONVERSATION = auto()
    DISABLED = auto()


_MENU_ACTIONS = frozenset({
    Action.MENU_UP,
    Action.MENU_DOWN,
    Action.CONFIRM,
    Action.CANCEL,
})

# Actions that are delivered to game code in each control mode.
MODE_ACTIONS: dict[ControlMode, frozenset[Action]] = {
    ControlMode.GAMEPLAY: frozenset(Action),
    ControlMode.IN_MENU: _MENU_ACTIONS | {Action.MENU, Action.DEBUG_TOGGLE},
    ControlMode.IN_CONVERSATION: _MENU_ACTIONS | {Action.DEBUG_TOGGLE},
    ControlMode.DISABLED: frozenset({Action.DEBUG_TOGGLE}),
}


DEFAULT_KEY_BINDINGS: dict[Action, list[int]] = {
    # Menu
    Action.MENU_UP: [pygame.K_UP, pygame.K_w],
    Action.MENU_DOWN: [pygame.K_DOWN, pygame.K_s],
    Action.CONFIRM: [pygame.K_RETURN, pygame.K_SPACE],
    Action.CANCEL: [pygame.K_ESCAPE, pygame.K_x],
    Action.MENU: [pygame.K_TAB],

    # Movement
    Action.MOVE_UP: [pygame.K_UP, pygame.K_w],
    Action.MOVE_DOWN: [pygame.K_DOWN, pygame.K_s],
    Action.MOVE_LEFT: [pygame.K_LEFT, pygame.K_a],
    Action.MOVE_RIGHT: [pygame.K_RIGHT, pygame.K_d],

    # World interaction
    Action.INTERACT: [pygame.K_e],
    Action.ATTACK: [pygame.K_j],
    Action.RUN: [pygame.K_LSHIFT, pygame.K_RSHIFT],

    # System
    Action.PAUSE: [pygame.K_p],
    Action.DEBUG_TOGGLE: [pygame.K_F3],
}

# Gamepad button bindings (SDL controller layout)
DEFAULT_GAMEPAD_BINDINGS: dict[Action, list[int]] = {
    Action.CONFIRM: [0],   # A button
    Action.CANCEL: [1],    # B button
    Action.INTERACT: [2],  # X button
    Action.MENU: [6],      # Back
    Action.PAUSE: [7],     # Start
}

# D-pad bindings (hat)
DEFAULT_GAMEPAD_HAT_BINDINGS: dict[tuple[int, int], Action] = {
    (0, 1): Action.MENU_UP,
    (0, -1): Action.MENU_DOWN,
}
