"""
Inventory costs on dialogue options.

Checking whether an option is affordable never changes the inventory.
Items are only removed by ``consume``, which the conversation session
calls once when the option is actually selected.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from narrative.dialogue.models import DialogueOption


logger = logging.getLogger(__name__)


class ItemContainer(Protocol):
    """The inventory operations dialogue costs need."""

    def has_item(self, item_id: str, quantity: int = 1) -> bool: ...

    def count_item(self, item_id: str) -> int: ...

    def remove_item(self, item_id: str, quantity: int = 1) -> int: ...


class InventoryGate:
    """
    Checks and pays inventory costs of dialogue options.

    Attributes:
        inventory: The player's inventory, or None if there is none
    """

    def __init__(self, inventory: Optional[ItemContainer] = None):
        self.inventory = inventory

    def can_select(self, option: DialogueOption) -> bool:
        """
        Check whether an option's item requirements are met.

        Args:
            option: The option to check

        Returns:
            True if the option is affordable (always True without costs)
        """
        if not option.has_inventory_cost:
            return True

        if self.inventory is None:
            logger.warning(f"No inventory to check requirements of option '{option.text}'")
            return False

        if option.required_item and not self.inventory.has_item(option.required_item):
            logger.debug(f"Missing item: {option.required_item}")
            return False

        for requirement in option.required_inventory_items:
            if not requirement.item_name:
                continue
            count = self.inventory.count_item(requirement.item_name)
            if count < requirement.required_quantity:
                logger.debug(
                    f"Insufficient {requirement.item_name}: "
                    f"has {count}, needs {requirement.required_quantity}"
                )
                return False

        return True

    def consume(self, option: DialogueOption) -> None:
        """Remove every consume-on-use requirement of an option from the inventory."""
        to_consume = [
            req for req in option.required_inventory_items
            if req.consume_on_use and req.item_name
        ]
        if not to_consume:
            return

        if self.inventory is None:
            logger.warning("No inventory to consume dialogue option costs from")
            return

        for requirement in to_consume:
            if not self.inventory.has_item(requirement.item_name):
                continue
            removed = self.inventory.remove_item(
                requirement.item_name, requirement.required_quantity
            )
            logger.info(f"Consumed {removed}x {requirement.item_name}")

    @staticmethod
    def describe(option: DialogueOption) -> str:
        """
        Human-readable cost of an option.

        Returns:
            "Requires: ..." or an empty string when the option is free
        """
        if not option.required_inventory_items:
            if option.required_item:
                return f"Requires: {option.required_item}"
            return ""

        parts = []
        for requirement in option.required_inventory_items:
            if requirement.display_text:
                parts.append(requirement.display_text)
            elif requirement.item_name:
                if requirement.required_quantity > 1:
                    parts.append(f"{requirement.required_quantity}x {requirement.item_name}")
                else:
                    parts.append(requirement.item_name)

        return f"Requires: {', '.join(parts)}" if parts else ""
