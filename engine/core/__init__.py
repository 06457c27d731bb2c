"""
Core engine module.

Exports:
- Entity: Entity container
- Component, register_component: Component base and registration
- System: System base class
- World: Entity/system container
- EventBus, Event, EngineEvent, UIEvent: Event system
- Action, ControlMode: Input actions and control modes
"""

from engine.core.entity import Entity
from engine.core.component import Component, register_component, get_component_type
from engine.core.system import System
from engine.core.world import World
from engine.core.events import EventBus, Event, EngineEvent, UIEvent
from engine.core.actions import Action, ControlMode

__all__ = [
    # ECS
    "Entity",
    "Component",
    "register_component",
    "get_component_type",
    "System",
    "World",
    # Events
    "EventBus",
    "Event",
    "EngineEvent",
    "UIEvent",
    # Input
    "Action",
    "ControlMode",
]
