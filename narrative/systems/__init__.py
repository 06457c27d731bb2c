"""
Narrative systems - logic-only processors.
"""

from narrative.systems.dialogue import DialogueSystem, DialogueEvent

__all__ = [
    "DialogueSystem",
    "DialogueEvent",
]
