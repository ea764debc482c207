"""
Core data models for the Hearthside simulation core.

This module contains the shared records used across all subsystems:
- Item catalogue (weights, fuel values, name lookup)
- Biomes, directions and grid positions
- The player location (outdoors at a position, or inside a room)
- The injectable dice roller used for every random draw
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, Sequence, TypeVar, Union
import random


T = TypeVar("T")


# =============================================================================
# ITEMS
# =============================================================================


@dataclass(frozen=True)
class ItemSpec:
    """Static properties of one item kind."""

    name: str
    aliases: tuple[str, ...] = ()
    weight: float = 0.1
    fuel_value: Optional[float] = None
    tinder: bool = False
    description: str = "A useful item."


class Item(str, Enum):
    """Every item kind the core knows about."""

    # Tools
    AXE = "axe"
    STONE_AXE = "stone_axe"
    KNIFE = "knife"
    STONE_KNIFE = "stone_knife"
    MATCHBOX = "matchbox"
    FISHING_ROD = "fishing_rod"

    # Wood and fuel
    LOG = "log"
    STICK = "stick"
    FIREWOOD = "firewood"
    KINDLING = "kindling"
    BARK = "bark"
    DRY_LEAVES = "dry_leaves"
    PINECONE = "pinecone"
    BAMBOO = "bamboo"
    DRIFTWOOD = "driftwood"

    # Crafting materials
    STONE = "stone"
    SHARP_STONE = "sharp_stone"
    PLANT_FIBER = "plant_fiber"
    CORDAGE = "cordage"

    # Food and drink
    WILD_BERRY = "wild_berry"
    WILD_HERBS = "wild_herbs"
    APPLE = "apple"
    DATE = "date"
    KETTLE = "kettle"
    WATER_KETTLE = "water_kettle"
    CLEAN_WATER = "clean_water"
    TEA_CUP = "tea_cup"
    HERBAL_TEA = "herbal_tea"
    SMALL_FISH = "small_fish"
    BIG_FISH = "big_fish"
    COOKED_FISH = "cooked_fish"

    # Blueprint-only targets
    CAMPFIRE = "campfire"

    @property
    def spec(self) -> ItemSpec:
        return ITEM_CATALOG[self]

    @property
    def display_name(self) -> str:
        return self.spec.name

    @property
    def weight(self) -> float:
        return self.spec.weight

    @property
    def fuel_value(self) -> Optional[float]:
        return self.spec.fuel_value

    @property
    def is_flammable(self) -> bool:
        return self.spec.fuel_value is not None

    @property
    def is_tinder(self) -> bool:
        return self.spec.tinder

    def _candidate_names(self) -> list[str]:
        return [self.spec.name, self.value, *self.spec.aliases]

    @classmethod
    def from_name(cls, query: str) -> Optional["Item"]:
        """
        Look up an item by name, alias or enum value.

        Exact (case-insensitive) matches win over suffix matches, so
        "stone" resolves to STONE rather than SHARP_STONE.

        Args:
            query: Free-form item name

        Returns:
            The matching Item, or None if nothing matches
        """
        q = query.strip().lower()
        if not q:
            return None
        for item in cls:
            if any(name.lower() == q for name in item._candidate_names()):
                return item
        if len(q) < 3:
            return None
        for item in cls:
            for name in item._candidate_names():
                n = name.lower()
                if n.endswith(q) or q.endswith(n):
                    return item
        return None


ITEM_CATALOG: dict[Item, ItemSpec] = {
    Item.AXE: ItemSpec(
        "axe", ("hatchet", "iron axe"), weight=3.0,
        description="A sturdy woodcutting axe with a worn hickory handle.",
    ),
    Item.STONE_AXE: ItemSpec(
        "stone axe", ("primitive axe", "hand axe"),
        description="A crude axe made by lashing a sharp stone to a stick.",
    ),
    Item.KNIFE: ItemSpec("knife", ("hunting knife", "steel knife")),
    Item.STONE_KNIFE: ItemSpec(
        "stone knife", ("flint knife",),
        description="A rough blade knapped from stone. Sharp enough to cut.",
    ),
    Item.MATCHBOX: ItemSpec("matchbox", ("matches", "match box")),
    Item.FISHING_ROD: ItemSpec("fishing rod", ("rod", "fishing pole", "pole")),
    Item.LOG: ItemSpec("log", ("unsplit log",), weight=5.0, fuel_value=60.0),
    Item.STICK: ItemSpec("stick", ("branch", "twig"), fuel_value=5.0),
    Item.FIREWOOD: ItemSpec("firewood", ("split firewood", "split wood"), weight=1.5, fuel_value=30.0),
    Item.KINDLING: ItemSpec(
        "kindling", ("tinder", "shavings"), fuel_value=10.0, tinder=True,
    ),
    Item.BARK: ItemSpec("strip of bark", ("bark", "birch bark"), fuel_value=6.0, tinder=True),
    Item.DRY_LEAVES: ItemSpec("dry leaves", ("leaves", "leaf bundle"), fuel_value=3.0, tinder=True),
    Item.PINECONE: ItemSpec("pinecone", ("pine cone",), fuel_value=5.0, tinder=True),
    Item.BAMBOO: ItemSpec("bamboo", ("bamboo stalk",), weight=1.0, fuel_value=8.0),
    Item.DRIFTWOOD: ItemSpec("driftwood", ("drift wood",), fuel_value=5.0),
    Item.STONE: ItemSpec(
        "stone", ("rock", "pebble"), weight=0.5,
        description="A smooth stone. Could be knapped into a tool.",
    ),
    Item.SHARP_STONE: ItemSpec(
        "sharp stone", ("sharp rock", "flint flake"),
        description="A stone with a razor-sharp edge.",
    ),
    Item.PLANT_FIBER: ItemSpec("plant fiber", ("fiber", "grass")),
    Item.CORDAGE: ItemSpec("cordage", ("rope", "string", "twine")),
    Item.WILD_BERRY: ItemSpec("wild berry", ("berries", "berry", "wild berries")),
    Item.WILD_HERBS: ItemSpec("wild herbs", ("herbs",)),
    Item.APPLE: ItemSpec("apple", ("red apple",)),
    Item.DATE: ItemSpec("date", ("palm fruit",)),
    Item.KETTLE: ItemSpec("copper kettle", ("kettle", "empty kettle"), weight=1.0),
    Item.WATER_KETTLE: ItemSpec("kettle with water", ("water kettle", "filled kettle"), weight=2.0),
    Item.CLEAN_WATER: ItemSpec("clean water", ("water", "boiled water")),
    Item.TEA_CUP: ItemSpec("ceramic tea cup", ("cup", "tea cup", "teacup")),
    Item.HERBAL_TEA: ItemSpec("cup of herbal tea", ("tea", "herbal tea")),
    Item.SMALL_FISH: ItemSpec("small fish", ("fish", "raw fish")),
    Item.BIG_FISH: ItemSpec("big fish", ("large fish", "hefty fish")),
    Item.COOKED_FISH: ItemSpec("cooked fish", ("grilled fish", "fish fillet")),
    Item.CAMPFIRE: ItemSpec(
        "campfire", ("fire pit",),
        description="A ring of stones with wood, ready to be lit.",
    ),
}


# =============================================================================
# GEOGRAPHY
# =============================================================================


class Biome(str, Enum):
    """Regional classification driving weather odds and ambient temperature."""

    DESERT = "desert"
    OASIS = "oasis"
    SPRING_FOREST = "spring_forest"
    WINTER_FOREST = "winter_forest"
    LAKE = "lake"
    MIXED_FOREST = "mixed_forest"
    PATH = "path"
    BAMBOO_GROVE = "bamboo_grove"
    CLEARING = "clearing"

    @property
    def base_temperature(self) -> float:
        return BIOME_BASE_TEMPERATURES[self]

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ")


BIOME_BASE_TEMPERATURES: dict[Biome, float] = {
    Biome.DESERT: 35.0,
    Biome.OASIS: 28.0,
    Biome.SPRING_FOREST: 18.0,
    Biome.WINTER_FOREST: -5.0,
    Biome.LAKE: 15.0,
    Biome.MIXED_FOREST: 20.0,
    Biome.PATH: 20.0,
    Biome.BAMBOO_GROVE: 22.0,
    Biome.CLEARING: 20.0,
}


class Direction(str, Enum):
    """Compass directions for movement."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def delta(self) -> tuple[int, int]:
        return {
            Direction.NORTH: (-1, 0),
            Direction.SOUTH: (1, 0),
            Direction.EAST: (0, 1),
            Direction.WEST: (0, -1),
        }[self]

    @classmethod
    def from_name(cls, name: str) -> Optional["Direction"]:
        n = name.strip().lower()
        for direction in cls:
            if n in (direction.value, direction.value[0]):
                return direction
        return None


@dataclass(frozen=True)
class Position:
    """A tile in world coordinates, with the cabin at the origin."""

    row: int
    col: int

    def moved(self, direction: Direction) -> "Position":
        dr, dc = direction.delta
        return Position(self.row + dr, self.col + dc)

    def distance_to(self, other: "Position") -> float:
        dr = self.row - other.row
        dc = self.col - other.col
        return (dr * dr + dc * dc) ** 0.5

    def to_dict(self) -> dict[str, int]:
        return {"row": self.row, "col": self.col}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Position":
        return cls(row=int(data["row"]), col=int(data["col"]))

    def key(self) -> str:
        """Stable string key used when positions index JSON objects."""
        return f"{self.row},{self.col}"

    @classmethod
    def from_key(cls, key: str) -> "Position":
        row, col = key.split(",")
        return cls(int(row), int(col))

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


CABIN_POSITION = Position(0, 0)
WOOD_SHED_POSITION = Position(-1, -1)
START_POSITION = Position(5, 0)

# World coordinates run -MAP_EXTENT..MAP_EXTENT on both axes
MAP_EXTENT = 50
MAP_SIZE = MAP_EXTENT * 2 + 1


# =============================================================================
# LOCATION
# =============================================================================


class Room(str, Enum):
    """Interior spaces the player can occupy."""

    CABIN_MAIN = "cabin_main"
    CABIN_TERRACE = "cabin_terrace"
    WOOD_SHED = "wood_shed"

    @property
    def display_name(self) -> str:
        return {
            Room.CABIN_MAIN: "cabin main room",
            Room.CABIN_TERRACE: "cabin terrace",
            Room.WOOD_SHED: "wood shed",
        }[self]

    @property
    def structure_position(self) -> Position:
        if self == Room.WOOD_SHED:
            return WOOD_SHED_POSITION
        return CABIN_POSITION


@dataclass(frozen=True)
class Outdoors:
    """The player stands on an outdoor tile."""

    position: Position


@dataclass(frozen=True)
class Indoor:
    """The player is inside one of the structures."""

    room: Room


Location = Union[Outdoors, Indoor]


def location_position(location: Location) -> Position:
    """Map position of a location; rooms resolve to their structure's tile."""
    if isinstance(location, Outdoors):
        return location.position
    return location.room.structure_position


def location_to_dict(location: Location) -> dict[str, Any]:
    if isinstance(location, Outdoors):
        return {"kind": "outdoors", "position": location.position.to_dict()}
    return {"kind": "indoor", "room": location.room.value}


def location_from_dict(data: dict[str, Any]) -> Location:
    if data.get("kind") == "indoor":
        return Indoor(Room(data["room"]))
    return Outdoors(Position.from_dict(data["position"]))


# =============================================================================
# DICE
# =============================================================================


@dataclass
class DiceResult:
    """Result of one random draw with full information."""

    notation: str
    rolls: list[int]
    modifier: int
    total: float
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.notation}: {self.rolls} = {self.total}"


class DiceRoller:
    """
    Randomization handle passed explicitly into every resolver call.

    Each instance owns its own random.Random, so two worlds (or two tests)
    never share state. Seed it for reproducible runs. The roller keeps no
    history of its own: every draw is forwarded to the optional listener,
    which is how the run log records rolls.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        listener: Optional[Callable[[DiceResult], None]] = None,
    ):
        self._seed = seed
        self._rng = random.Random(seed)
        self.listener = listener

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def _record(self, result: DiceResult) -> None:
        if self.listener is not None:
            self.listener(result)

    def randint(self, low: int, high: int, reason: str = "") -> int:
        """Integer in [low, high], both ends inclusive."""
        value = self._rng.randint(low, high)
        self._record(DiceResult(f"range({low}-{high})", [value], 0, value, reason))
        return value

    def random(self, reason: str = "") -> float:
        """Uniform float in [0, 1)."""
        value = self._rng.random()
        self._record(DiceResult("uniform", [], 0, value, reason))
        return value

    def uniform(self, low: float, high: float, reason: str = "") -> float:
        """Uniform float between low and high."""
        value = self._rng.uniform(low, high)
        self._record(DiceResult(f"uniform({low}-{high})", [], 0, value, reason))
        return value

    def chance(self, probability: float, reason: str = "") -> bool:
        """True with the given probability."""
        return self.random(reason) < probability

    def choice(self, options: Sequence[T], reason: str = "") -> T:
        """Pick uniformly from a non-empty sequence."""
        index = self._rng.randrange(len(options))
        self._record(DiceResult(f"choice(1-{len(options)})", [index + 1], 0, index + 1, reason))
        return options[index]

    def weighted_choice(self, options: Sequence[tuple[T, int]], reason: str = "") -> T:
        """
        Pick one option by integer weight.

        Zero-weight options are never chosen. A table whose weights sum to
        zero returns its last option.
        """
        total = sum(max(weight, 0) for _, weight in options)
        roll = self._rng.randrange(total) if total > 0 else 0
        self._record(DiceResult(f"weighted(0-{max(total - 1, 0)})", [roll], 0, roll, reason))
        cursor = 0
        for option, weight in options:
            cursor += max(weight, 0)
            if roll < cursor:
                return option
        return options[-1][0]
