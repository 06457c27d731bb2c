"""
System base class for logic processors.

Systems process the entities that carry a given set of components.
The dialogue system, for example, drives every DialogueView in the
world from player input.

Usage:
    class DialogueSystem(System):
        required_components = [DialogueView]

        def process_entity(self, entity: Entity, dt: float) -> None:
            view = entity.get(DialogueView)
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Iterator

from engine.core.component import Component

if TYPE_CHECKING:
    from engine.core.entity import Entity
    from engine.core.world import World


class System(ABC):
    """
    Base class for all systems.

    Override required_components to select entities and
    process_entity to define the per-entity logic.
    """

    required_components: ClassVar[list[type[Component]]] = []

    # Higher priority systems run first
    priority: ClassVar[int] = 0

    enabled: bool = True

    def __init__(self):
        self._world: World | None = None

    @property
    def world(self) -> World:
        """Get the world this system belongs to."""
        if self._world is None:
            raise RuntimeError(f"System {self.__class__.__name__} not attached to world")
        return self._world

    def on_add(self, world: World) -> None:
        """Called when system is added to a world."""
        self._world = world

    def on_remove(self) -> None:
        """Called when system is removed from a world."""
        self._world = None

    def get_entities(self) -> Iterator[Entity]:
        """Get entities that match this system's required components."""
        if not self._world:
            return iter([])

        if not self.required_components:
            return iter(self._world.entities)

        return self._world.get_entities_with(*self.required_components)

    def update(self, dt: float) -> None:
        """
        Update this system.

        Default implementation calls process_entity for each active
        matching entity.

        Args:
            dt: Delta time in seconds
        """
        if not self.enabled:
            return

        for entity in list(self.get_entities()):
            if entity.active:
                self.process_entity(entity, dt)

    @abstractmethod
    def process_entity(self, entity: Entity, dt: float) -> None:
        """
        Process a single entity.

        Args:
            entity: The entity to process
            dt: Delta time in seconds
        """

    def __repr__(self) -> str:
        required = ", ".join(c.__name__ for c in self.required_components)
        return f"{self.__class__.__name__}(requires=[{required}])"
