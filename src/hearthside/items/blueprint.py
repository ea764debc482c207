"""
Blueprint assembler.

A blueprint tracks partial progress toward one crafted item: a fixed
requirement map taken from the recipe table, and how much of each
ingredient has been added so far. Adding never overshoots a requirement.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
import math

from hearthside.advancement.skill_ledger import Skill
from hearthside.data_models import Item


@dataclass(frozen=True)
class Recipe:
    """Static recipe for one craftable target."""

    target: Item
    required: tuple[tuple[Item, int], ...]
    time_cost: int  # minutes
    skill: Skill
    xp_award: int = 0


RECIPES: dict[Item, Recipe] = {
    Item.STONE_KNIFE: Recipe(
        Item.STONE_KNIFE,
        ((Item.SHARP_STONE, 1), (Item.STICK, 1), (Item.PLANT_FIBER, 1)),
        time_cost=30, skill=Skill.STONEMASONRY, xp_award=10,
    ),
    Item.STONE_AXE: Recipe(
        Item.STONE_AXE,
        ((Item.SHARP_STONE, 1), (Item.STICK, 1), (Item.CORDAGE, 1)),
        time_cost=40, skill=Skill.STONEMASONRY, xp_award=10,
    ),
    Item.CAMPFIRE: Recipe(
        Item.CAMPFIRE,
        ((Item.STONE, 4), (Item.KINDLING, 1), (Item.LOG, 2)),
        time_cost=20, skill=Skill.SURVIVAL, xp_award=5,
    ),
    Item.CORDAGE: Recipe(
        Item.CORDAGE,
        ((Item.PLANT_FIBER, 3),),
        time_cost=10, skill=Skill.TAILORING, xp_award=5,
    ),
    Item.FISHING_ROD: Recipe(
        Item.FISHING_ROD,
        ((Item.BAMBOO, 1), (Item.STICK, 1), (Item.CORDAGE, 1)),
        time_cost=35, skill=Skill.TAILORING,
    ),
}


def get_recipe(target: Item) -> Optional[Recipe]:
    return RECIPES.get(target)


def craftable_items() -> list[Item]:
    return list(RECIPES)


@dataclass
class Blueprint:
    """
    Partial progress toward a crafted item.

    Invariant: current[item] <= required[item] for every item.
    """

    target_item: Item
    required: dict[Item, int]
    current: dict[Item, int] = field(default_factory=dict)
    time_cost: int = 0

    @classmethod
    def new(cls, target: Item) -> Optional["Blueprint"]:
        """
        Start a blueprint from the recipe table.

        Returns:
            A fresh Blueprint, or None if the target has no recipe
        """
        recipe = get_recipe(target)
        if recipe is None:
            return None
        return cls(
            target_item=recipe.target,
            required=dict(recipe.required),
            time_cost=recipe.time_cost,
        )

    @property
    def recipe(self) -> Recipe:
        return RECIPES[self.target_item]

    def needs(self, item: Item) -> bool:
        return self.current.get(item, 0) < self.required.get(item, 0)

    def add_material(self, item: Item) -> bool:
        """Add one unit; False when the item is not needed or already satisfied."""
        if not self.needs(item):
            return False
        self.current[item] = self.current.get(item, 0) + 1
        return True

    def is_complete(self) -> bool:
        return all(self.current.get(item, 0) >= qty for item, qty in self.required.items())

    def missing_materials(self) -> dict[Item, int]:
        """Remaining quantity per ingredient, positive entries only."""
        return {
            item: qty - self.current.get(item, 0)
            for item, qty in self.required.items()
            if self.current.get(item, 0) < qty
        }

    def added_materials(self) -> list[tuple[Item, int]]:
        return [(item, qty) for item, qty in self.current.items() if qty > 0]

    def assembly_ticks(self) -> int:
        """Orchestrator ticks the final assembly takes (at least one)."""
        return max(math.ceil(self.time_cost / 10), 1)

    def assembly_energy(self) -> float:
        return max(self.assembly_ticks() * 2.0, 5.0)

    def progress_summary(self) -> str:
        entries = sorted(self.required.items(), key=lambda pair: pair[0].display_name)
        return ", ".join(
            f"{item.display_name} {self.current.get(item, 0)}/{qty}" for item, qty in entries
        )

    def status_description(self) -> str:
        name = self.target_item.display_name
        if self.is_complete():
            return f"Blueprint for {name} is ready to assemble. Total build time: {self.time_cost} mins."
        return f"Blueprint for {name}. Progress: {self.progress_summary()}. Total build time: {self.time_cost} mins."

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_item": self.target_item.value,
            "required": {item.value: qty for item, qty in self.required.items()},
            "current": {item.value: qty for item, qty in self.current.items()},
            "time_cost": self.time_cost,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Blueprint":
        required = {Item(name): int(qty) for name, qty in data["required"].items()}
        current = {
            Item(name): min(int(qty), required.get(Item(name), 0))
            for name, qty in data.get("current", {}).items()
            if int(qty) > 0
        }
        return cls(
            target_item=Item(data["target_item"]),
            required=required,
            current={item: qty for item, qty in current.items() if qty > 0},
            time_cost=int(data.get("time_cost", 0)),
        )
