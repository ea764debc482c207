"""
The single, explicitly-owned world state record.

Everything the simulation mutates lives here: clock, weather, the cabin
fireplace, the player's vitals, skills, inventory and location, the active
blueprint, the wood shed, forage nodes, stone deposits, trees and wildlife. One
WorldState is owned by one Simulation; nothing in the core keeps a module
level reference to it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
import logging

from hearthside.advancement.skill_ledger import SkillLedger
from hearthside.data_models import (
    Biome,
    DiceRoller,
    Indoor,
    Item,
    Location,
    Outdoors,
    Position,
    Room,
    START_POSITION,
    location_from_dict,
    location_position,
    location_to_dict,
)
from hearthside.items.blueprint import Blueprint
from hearthside.items.inventory import DEFAULT_MAX_WEIGHT, Inventory
from hearthside.player.vitals import Vitals
from hearthside.weather.weather_types import WeatherField
from hearthside.world.clock import Clock
from hearthside.world.fireplace import Fireplace
from hearthside.world.wildlife import Wildlife, spawn_wildlife


logger = logging.getLogger(__name__)


SAVE_FORMAT_VERSION = 1

# Ticks an emptied forage node needs before it refills
FORAGE_COOLDOWN_TICKS = 12

STONE_DEPOSIT_RANGE = (3, 10)

TREE_HITS = 5
BAMBOO_HITS = 3

# Ticks a stump needs before a new tree stands (one in-game day)
TREE_REGROWTH_TICKS = 144

STARTING_SHED_LOGS = 8

STARTING_INVENTORY: tuple[tuple[Item, int], ...] = (
    (Item.MATCHBOX, 1),
    (Item.KETTLE, 1),
    (Item.TEA_CUP, 1),
    (Item.APPLE, 2),
)


# =============================================================================
# WOOD SHED
# =============================================================================


@dataclass
class WoodShed:
    """Log pile, firewood stack, the axe on its hook and the chopping block."""

    logs: int = STARTING_SHED_LOGS
    firewood: int = 0
    axe_present: bool = True
    log_on_block: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "logs": self.logs,
            "firewood": self.firewood,
            "axe_present": self.axe_present,
            "log_on_block": self.log_on_block,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WoodShed":
        return cls(
            logs=max(0, int(data.get("logs", STARTING_SHED_LOGS))),
            firewood=max(0, int(data.get("firewood", 0))),
            axe_present=bool(data.get("axe_present", True)),
            log_on_block=bool(data.get("log_on_block", False)),
        )


# =============================================================================
# FORAGE NODES
# =============================================================================


def forage_charges_range(biome: Biome) -> tuple[int, int]:
    """Inclusive charge range a freshly grown node gets in a biome."""
    if biome == Biome.DESERT:
        return 1, 2
    if biome == Biome.OASIS:
        return 3, 4
    if biome == Biome.WINTER_FOREST:
        return 2, 3
    if biome in (Biome.LAKE, Biome.BAMBOO_GROVE):
        return 3, 5
    return 4, 6


@dataclass
class ForageNode:
    """Forageable brush on one tile; regrows after a cooldown once emptied."""

    charges: int
    cooldown: int = 0

    @classmethod
    def create(cls, biome: Biome, dice: DiceRoller) -> "ForageNode":
        low, high = forage_charges_range(biome)
        return cls(charges=dice.randint(low, high, reason=f"forage charges ({biome.value})"))

    @property
    def is_depleted(self) -> bool:
        return self.charges <= 0

    def spend(self) -> None:
        self.charges = max(0, self.charges - 1)
        if self.charges == 0:
            self.cooldown = FORAGE_COOLDOWN_TICKS

    def tick(self, biome: Biome, dice: DiceRoller) -> bool:
        """
        Count down an empty node's cooldown.

        Returns:
            True if the node refilled this tick
        """
        if self.charges > 0 or self.cooldown <= 0:
            return False
        self.cooldown -= 1
        if self.cooldown == 0:
            low, high = forage_charges_range(biome)
            self.charges = dice.randint(low, high, reason=f"forage regrowth ({biome.value})")
            return True
        return False

    def to_dict(self) -> dict[str, int]:
        return {"charges": self.charges, "cooldown": self.cooldown}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ForageNode":
        return cls(charges=max(0, int(data.get("charges", 0))), cooldown=max(0, int(data.get("cooldown", 0))))


# =============================================================================
# TREES
# =============================================================================


class TreeKind(str, Enum):
    PINE = "pine"
    BIRCH = "birch"
    APPLE = "apple"
    BAMBOO = "bamboo"

    @property
    def display_name(self) -> str:
        return "bamboo stand" if self == TreeKind.BAMBOO else f"{self.value} tree"

    @property
    def hits_required(self) -> int:
        return BAMBOO_HITS if self == TreeKind.BAMBOO else TREE_HITS


# Biomes where standing trees grow; the bamboo grove only grows bamboo
TREE_BIOMES = frozenset({
    Biome.SPRING_FOREST,
    Biome.WINTER_FOREST,
    Biome.MIXED_FOREST,
    Biome.BAMBOO_GROVE,
})


@dataclass
class Tree:
    """
    One standing tree on a tile.

    Each successful axe stroke adds a hit; at hits_required the tree falls
    and the stump starts a regrowth countdown.
    """

    kind: TreeKind
    hits_done: int = 0
    felled: bool = False
    regrowth: int = 0

    @classmethod
    def create(cls, biome: Biome, dice: DiceRoller) -> "Tree":
        if biome == Biome.BAMBOO_GROVE:
            return cls(TreeKind.BAMBOO)
        kind = dice.choice([TreeKind.PINE, TreeKind.BIRCH, TreeKind.APPLE], reason="tree kind")
        return cls(kind)

    @property
    def hits_required(self) -> int:
        return self.kind.hits_required

    def progress_text(self) -> str:
        return f"Chopping progress: {self.hits_done}/{self.hits_required}."

    def strike(self) -> bool:
        """
        Land one good stroke.

        Returns:
            True if this stroke felled the tree
        """
        self.hits_done = min(self.hits_done + 1, self.hits_required)
        if self.hits_done >= self.hits_required:
            self.felled = True
            self.regrowth = TREE_REGROWTH_TICKS
            return True
        return False

    def tick(self) -> bool:
        """
        Count down a stump's regrowth.

        Returns:
            True if a new tree stands this tick
        """
        if not self.felled:
            return False
        self.regrowth = max(0, self.regrowth - 1)
        if self.regrowth == 0:
            self.felled = False
            self.hits_done = 0
            return True
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "hits_done": self.hits_done,
            "felled": self.felled,
            "regrowth": self.regrowth,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Tree":
        kind = TreeKind(data["kind"])
        return cls(
            kind=kind,
            hits_done=min(max(0, int(data.get("hits_done", 0))), kind.hits_required),
            felled=bool(data.get("felled", False)),
            regrowth=max(0, int(data.get("regrowth", 0))),
        )


# =============================================================================
# WORLD STATE
# =============================================================================


@dataclass
class WorldState:
    """Complete mutable state of one simulated world."""

    clock: Clock = field(default_factory=Clock)
    weather: WeatherField = field(default_factory=WeatherField)
    fireplace: Fireplace = field(default_factory=Fireplace)
    vitals: Vitals = field(default_factory=Vitals)
    skills: SkillLedger = field(default_factory=SkillLedger)
    inventory: Inventory = field(default_factory=Inventory)
    location: Location = field(default_factory=lambda: Outdoors(START_POSITION))
    active_project: Optional[Blueprint] = None
    wood_shed: WoodShed = field(default_factory=WoodShed)
    wildlife: list[Wildlife] = field(default_factory=list)
    forage_nodes: dict[Position, ForageNode] = field(default_factory=dict)
    stone_deposits: dict[Position, int] = field(default_factory=dict)
    trees: dict[Position, Tree] = field(default_factory=dict)
    pending_messages: list[str] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        dice: DiceRoller,
        max_carry_weight: float = DEFAULT_MAX_WEIGHT,
        wildlife_count: int = 6,
    ) -> "WorldState":
        """
        Build a fresh world: rolled weather, spawned wildlife, starting kit.

        Args:
            dice: Random source for the initial rolls
            max_carry_weight: Inventory weight limit
            wildlife_count: Number of animals to spawn
        """
        inventory = Inventory(max_carry_weight)
        for item, quantity in STARTING_INVENTORY:
            inventory.add(item, quantity)

        world = cls(
            weather=WeatherField.create(dice),
            inventory=inventory,
            wildlife=spawn_wildlife(dice, wildlife_count),
        )
        logger.info(f"Created new world at {world.clock.formatted()}")
        return world

    # =========================================================================
    # LOCATION
    # =========================================================================

    @property
    def position(self) -> Position:
        """Map tile of the player; rooms resolve to their structure's tile."""
        return location_position(self.location)

    @property
    def room(self) -> Optional[Room]:
        return self.location.room if isinstance(self.location, Indoor) else None

    @property
    def is_outdoors(self) -> bool:
        return isinstance(self.location, Outdoors)

    def is_in(self, room: Room) -> bool:
        return self.room == room

    # =========================================================================
    # LAZILY SEEDED RESOURCES
    # =========================================================================

    def forage_node_at(self, position: Position, biome: Biome, dice: DiceRoller) -> ForageNode:
        node = self.forage_nodes.get(position)
        if node is None:
            node = ForageNode.create(biome, dice)
            self.forage_nodes[position] = node
        return node

    def stones_at(self, position: Position, dice: DiceRoller) -> int:
        if position not in self.stone_deposits:
            low, high = STONE_DEPOSIT_RANGE
            self.stone_deposits[position] = dice.randint(low, high, reason="stone deposit")
        return self.stone_deposits[position]

    def take_stone(self, position: Position) -> bool:
        remaining = self.stone_deposits.get(position, 0)
        if remaining <= 0:
            return False
        self.stone_deposits[position] = remaining - 1
        return True

    def tree_at(self, position: Position, biome: Biome, dice: DiceRoller) -> Optional[Tree]:
        """The tile's tree, grown on first visit; None where trees don't grow."""
        tree = self.trees.get(position)
        if tree is None and biome in TREE_BIOMES:
            tree = Tree.create(biome, dice)
            self.trees[position] = tree
        return tree

    # =========================================================================
    # MESSAGES
    # =========================================================================

    def push_message(self, message: str) -> None:
        self.pending_messages.append(message)

    def drain_messages(self) -> list[str]:
        messages, self.pending_messages = self.pending_messages, []
        return messages

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": SAVE_FORMAT_VERSION,
            "clock": self.clock.to_dict(),
            "weather": self.weather.to_dict(),
            "fireplace": self.fireplace.to_dict(),
            "vitals": self.vitals.to_dict(),
            "skills": self.skills.to_dict(),
            "inventory": self.inventory.to_dict(),
            "location": location_to_dict(self.location),
            "active_project": self.active_project.to_dict() if self.active_project else None,
            "wood_shed": self.wood_shed.to_dict(),
            "wildlife": [animal.to_dict() for animal in self.wildlife],
            "forage_nodes": {pos.key(): node.to_dict() for pos, node in self.forage_nodes.items()},
            "stone_deposits": {pos.key(): count for pos, count in self.stone_deposits.items()},
            "trees": {pos.key(): tree.to_dict() for pos, tree in self.trees.items()},
            "pending_messages": list(self.pending_messages),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], max_carry_weight: Optional[float] = None) -> "WorldState":
        """
        Rebuild a world from saved data.

        Missing sections take defaults; malformed sections raise KeyError,
        TypeError or ValueError for the caller to handle.
        """
        project = data.get("active_project")
        location = data.get("location")
        return cls(
            clock=Clock.from_dict(data.get("clock", {})),
            weather=WeatherField.from_dict(data.get("weather", {})),
            fireplace=Fireplace.from_dict(data.get("fireplace", {})),
            vitals=Vitals.from_dict(data.get("vitals")),
            skills=SkillLedger.from_dict(data.get("skills", {})),
            inventory=Inventory.from_dict(data.get("inventory", {}), max_weight=max_carry_weight),
            location=location_from_dict(location) if location else Outdoors(START_POSITION),
            active_project=Blueprint.from_dict(project) if project else None,
            wood_shed=WoodShed.from_dict(data.get("wood_shed", {})),
            wildlife=[Wildlife.from_dict(entry) for entry in data.get("wildlife", [])],
            forage_nodes={
                Position.from_key(key): ForageNode.from_dict(entry)
                for key, entry in data.get("forage_nodes", {}).items()
            },
            stone_deposits={
                Position.from_key(key): max(0, int(count))
                for key, count in data.get("stone_deposits", {}).items()
            },
            trees={
                Position.from_key(key): Tree.from_dict(entry)
                for key, entry in data.get("trees", {}).items()
            },
            pending_messages=[str(m) for m in data.get("pending_messages", [])],
        )
