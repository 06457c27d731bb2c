"""
Engine core used by the narrative layer.

Provides the entity/component/system world, the typed event bus and
action-based input with control modes.

Quick Start:
    from engine import World, EventBus, InputHandler

    bus = EventBus()
    world = World(bus)
    input_handler = InputHandler(bus)
"""

__version__ = "0.1.0"

from engine.core import (
    Entity,
    Component,
    register_component,
    System,
    World,
    EventBus,
    Event,
    EngineEvent,
    UIEvent,
    Action,
    ControlMode,
)

from engine.input import InputHandler

__all__ = [
    # ECS
    "Entity",
    "Component",
    "register_component",
    "System",
    "World",
    # Events
    "EventBus",
    "Event",
    "EngineEvent",
    "UIEvent",
    # Input
    "InputHandler",
    "Action",
    "ControlMode",
]
