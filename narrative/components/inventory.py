"""
Inventory components - item stacks and the item container.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import Field

from engine.core.component import Component


@dataclass
class ItemStack:
    """
    A stack of items in inventory.

    Attributes:
        item_id: Item name
        quantity: Number of items in stack
        max_stack: Maximum stack size
    """
    item_id: str = ""
    quantity: int = 1
    max_stack: int = 99

    @property
    def is_full(self) -> bool:
        return self.quantity >= self.max_stack

    @property
    def is_empty(self) -> bool:
        return self.quantity <= 0

    def add(self, amount: int = 1) -> int:
        """
        Add to stack.

        Returns:
            Amount that couldn't be added (overflow)
        """
        to_add = min(amount, self.max_stack - self.quantity)
        self.quantity += to_add
        return amount - to_add

    def remove(self, amount: int = 1) -> int:
        """
        Remove from stack.

        Returns:
            Actual amount removed
        """
        to_remove = min(amount, self.quantity)
        self.quantity -= to_remove
        return to_remove


class Inventory(Component):
    """
    Item container carried by the player.

    Dialogue options check it for costs and consume from it when
    chosen.

    Attributes:
        slots: Item stacks (None = empty slot)
        max_slots: Maximum inventory size
    """
    slots: list[Optional[ItemStack]] = Field(default_factory=list)
    max_slots: int = 20

    def model_post_init(self, __context) -> None:
        while len(self.slots) < self.max_slots:
            self.slots.append(None)

    @property
    def free_slots(self) -> int:
        return sum(1 for s in self.slots if s is None)

    def add_item(self, item_id: str, quantity: int = 1, max_stack: int = 99) -> int:
        """
        Add item to inventory.

        Args:
            item_id: Item name
            quantity: Amount to add
            max_stack: Maximum stack size for this item

        Returns:
            Amount that couldn't be added
        """
        remaining = quantity

        # Top up existing stacks first
        for slot in self.slots:
            if slot and slot.item_id == item_id and not slot.is_full:
                remaining = slot.add(remaining)
                if remaining <= 0:
                    return 0

        for i, slot in enumerate(self.slots):
            if slot is None:
                new_stack = ItemStack(item_id=item_id, quantity=0, max_stack=max_stack)
                remaining = new_stack.add(remaining)
                self.slots[i] = new_stack
                if remaining <= 0:
                    return 0

        return remaining

    def remove_item(self, item_id: str, quantity: int = 1) -> int:
        """
        Remove item from inventory.

        Args:
            item_id: Item name
            quantity: Amount to remove

        Returns:
            Amount actually removed
        """
        remaining = quantity
        removed = 0

        for i, slot in enumerate(self.slots):
            if slot and slot.item_id == item_id:
                taken = slot.remove(remaining)
                removed += taken
                remaining -= taken

                if slot.is_empty:
                    self.slots[i] = None

                if remaining <= 0:
                    break

        return removed

    def has_item(self, item_id: str, quantity: int = 1) -> bool:
        """Check if inventory contains enough of an item."""
        return self.count_item(item_id) >= quantity

    def count_item(self, item_id: str) -> int:
        """Count total quantity of an item."""
        return sum(s.quantity for s in self.slots if s and s.item_id == item_id)

    def get_items(self) -> list[ItemStack]:
        """Get all non-empty item stacks."""
        return [slot for slot in self.slots if slot is not None]
