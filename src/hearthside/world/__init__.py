"""World simulation: clock, map, fireplace and wildlife."""

from hearthside.world.clock import MINUTES_PER_TICK, Clock, TimeOfDay
from hearthside.world.world_map import MapView, Tile, TileType, WorldMap
from hearthside.world.fireplace import FireState, Fireplace, IgnitionResult
from hearthside.world.wildlife import Behavior, Species, Wildlife, animals_near, spawn_wildlife

__all__ = [
    "MINUTES_PER_TICK",
    "Clock",
    "TimeOfDay",
    "MapView",
    "Tile",
    "TileType",
    "WorldMap",
    "FireState",
    "Fireplace",
    "IgnitionResult",
    "Behavior",
    "Species",
    "Wildlife",
    "animals_near",
    "spawn_wildlife",
]
