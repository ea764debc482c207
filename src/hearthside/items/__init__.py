"""Carried items and crafting blueprints."""

from hearthside.items.inventory import Inventory, InventorySlot
from hearthside.items.blueprint import RECIPES, Blueprint, Recipe, craftable_items, get_recipe

__all__ = [
    "Inventory",
    "InventorySlot",
    "RECIPES",
    "Blueprint",
    "Recipe",
    "craftable_items",
    "get_recipe",
]
