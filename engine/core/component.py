"""
Component base class for data-only components.

Components hold state that systems and managers read and mutate.
Flag stores, settler profiles and inventories in the narrative layer
are all components so they live on the entity they describe.

Usage:
    class NarrativeFlags(Component):
        flags: dict[str, str] = Field(default_factory=dict)

    npc.add(NarrativeFlags())
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all components.

    Components are Pydantic models, which gives them:
    - Validation on construction and assignment
    - JSON serialization through model_dump
    - Default values
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra='forbid',
    )

    # Component type name (used for serialization)
    _type_name: ClassVar[str] = ""

    # Owning entity id, set by Entity.add
    _entity_id: int | None = None

    @classmethod
    def get_type_name(cls) -> str:
        """Get the component type name for serialization."""
        return cls._type_name or cls.__name__

    @property
    def entity_id(self) -> int | None:
        """Id of the entity this component is attached to."""
        return self._entity_id

    def clone(self) -> Component:
        """Create a deep copy of this component."""
        return self.model_copy(deep=True)


# Registry of component types for deserialization
_component_registry: dict[str, type[Component]] = {}


def register_component(cls: type[Component]) -> type[Component]:
    """
    Decorator to register a component type.

    Usage:
        @register_component
        class SettlerProfile(Component):
            settler_name: str = ""
    """
    _component_registry[cls.get_type_name()] = cls
    return cls


def get_component_type(type_name: str) -> type[Component] | None:
    """Get component class by type name."""
    return _component_registry.get(type_name)


def get_all_component_types() -> dict[str, type[Component]]:
    """Get all registered component types."""
    return _component_registry.copy()
