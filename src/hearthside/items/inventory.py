"""
Capacity-limited inventory.

An ordered list of slots, one per item kind, with the total carried weight
bounded by max_weight. add() is all-or-nothing: a rejected add leaves the
inventory exactly as it was, which lets callers tentatively remove
something elsewhere and roll it back when the add fails.
"""

from dataclasses import dataclass
from typing import Any, Optional
import logging

from hearthside.data_models import Item


logger = logging.getLogger(__name__)


DEFAULT_MAX_WEIGHT = 50.0

# Slack for float error when summing tenths of a kilogram
WEIGHT_TOLERANCE = 1e-9


@dataclass
class InventorySlot:
    item: Item
    quantity: int

    @property
    def weight(self) -> float:
        return self.item.weight * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {"item": self.item.value, "quantity": self.quantity}


class Inventory:
    """Item multiset with a weight ceiling."""

    def __init__(self, max_weight: float = DEFAULT_MAX_WEIGHT):
        self.max_weight = max_weight
        self._slots: list[InventorySlot] = []

    def _slot(self, item: Item) -> Optional[InventorySlot]:
        for slot in self._slots:
            if slot.item == item:
                return slot
        return None

    @property
    def slots(self) -> list[InventorySlot]:
        """Copies of the slots, in insertion order."""
        return [InventorySlot(slot.item, slot.quantity) for slot in self._slots]

    def weight(self) -> float:
        return sum(slot.weight for slot in self._slots)

    def fits(self, extra_weight: float) -> bool:
        """Whether the pack stays within max_weight after a net weight change."""
        return self.weight() + extra_weight <= self.max_weight + WEIGHT_TOLERANCE

    def can_carry(self, item: Item, quantity: int = 1) -> bool:
        return self.fits(item.weight * quantity)

    def quantity(self, item: Item) -> int:
        slot = self._slot(item)
        return slot.quantity if slot else 0

    def has(self, item: Item, quantity: int = 1) -> bool:
        return self.quantity(item) >= quantity

    def has_any(self, *items: Item) -> bool:
        return any(self.has(item) for item in items)

    def add(self, item: Item, quantity: int = 1) -> bool:
        """
        Add items if the weight limit allows.

        Args:
            item: Item kind to add
            quantity: Number of units (positive)

        Returns:
            True if added; False with no change when over capacity
        """
        if quantity <= 0:
            raise ValueError(f"Quantity must be positive, got {quantity}")
        if not self.can_carry(item, quantity):
            logger.debug(f"Cannot carry {quantity} x {item.value}: {self.weight():.1f}/{self.max_weight}")
            return False

        slot = self._slot(item)
        if slot is None:
            self._slots.append(InventorySlot(item, quantity))
        else:
            slot.quantity += quantity
        return True

    def remove(self, item: Item, quantity: int = 1) -> bool:
        """
        Remove items, deleting the slot when it reaches zero.

        Returns:
            True if removed; False with no change when not enough are held
        """
        if quantity <= 0:
            raise ValueError(f"Quantity must be positive, got {quantity}")
        slot = self._slot(item)
        if slot is None or slot.quantity < quantity:
            return False
        slot.quantity -= quantity
        if slot.quantity == 0:
            self._slots.remove(slot)
        return True

    def is_empty(self) -> bool:
        return not self._slots

    def describe(self) -> str:
        if not self._slots:
            return "Your pack is empty."
        parts = [
            slot.item.display_name if slot.quantity == 1 else f"{slot.quantity} x {slot.item.display_name}"
            for slot in self._slots
        ]
        return f"You carry: {', '.join(parts)} ({self.weight():.1f}/{self.max_weight:.1f} kg)"

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_weight": self.max_weight,
            "slots": [slot.to_dict() for slot in self._slots],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], max_weight: Optional[float] = None) -> "Inventory":
        """
        Rebuild an inventory; unknown item names and empty slots are dropped.

        Saved slots are restored as-is even if they exceed a lowered limit.
        """
        inventory = cls(max_weight if max_weight is not None else float(data.get("max_weight", DEFAULT_MAX_WEIGHT)))
        for entry in data.get("slots", []):
            try:
                item = Item(entry["item"])
            except ValueError:
                logger.warning(f"Dropping unknown item from saved inventory: {entry.get('item')}")
                continue
            quantity = int(entry.get("quantity", 0))
            if quantity <= 0:
                continue
            slot = inventory._slot(item)
            if slot is None:
                inventory._slots.append(InventorySlot(item, quantity))
            else:
                slot.quantity += quantity
        return inventory
