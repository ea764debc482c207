"""
Read-only world map.

A fixed square grid centred on the cabin. The simulation core only queries
it (bounds, walkability, biome, water adjacency) and never mutates it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from hearthside.data_models import MAP_EXTENT, Biome, Position


class TileType(str, Enum):
    FOREST = "forest"
    LAKE = "lake"
    PATH = "path"
    CLEARING = "clearing"


@dataclass(frozen=True)
class Tile:
    tile_type: TileType
    biome: Biome
    walkable: bool


class MapView(Protocol):
    """The queries the core makes against the map."""

    def is_valid(self, position: Position) -> bool: ...

    def is_walkable(self, position: Position) -> bool: ...

    def biome_at(self, position: Position) -> Biome: ...

    def is_near_water(self, position: Position) -> bool: ...


def _is_lake_area(row: int, col: int) -> bool:
    return -5 <= row <= -1 and -4 <= col <= 4


def determine_biome(row: int, col: int) -> Biome:
    """Static biome layout in world coordinates."""
    if _is_lake_area(row, col):
        return Biome.OASIS if col <= -3 else Biome.LAKE
    if (row, col) in ((0, 0), (-1, -1)):
        return Biome.CLEARING
    if 0 <= row <= 1 and -3 <= col <= -1:
        return Biome.BAMBOO_GROVE
    if col <= -5:
        return Biome.DESERT
    if col >= 5:
        return Biome.WINTER_FOREST
    if row <= -4:
        return Biome.SPRING_FOREST
    if col == 0 and 1 <= row <= 5:
        return Biome.PATH
    return Biome.MIXED_FOREST


def determine_tile(row: int, col: int) -> Tile:
    biome = determine_biome(row, col)
    if _is_lake_area(row, col):
        return Tile(TileType.LAKE, biome, walkable=False)
    border = abs(row) == MAP_EXTENT or abs(col) == MAP_EXTENT
    if biome == Biome.CLEARING:
        tile_type = TileType.CLEARING
    elif biome == Biome.PATH:
        tile_type = TileType.PATH
    else:
        tile_type = TileType.FOREST
    return Tile(tile_type, biome, walkable=not border)


class WorldMap:
    """Grid of tiles indexed by world position; built once, then read-only."""

    def __init__(self, extent: int = MAP_EXTENT):
        self.extent = extent
        self.size = extent * 2 + 1
        self._tiles: list[list[Tile]] = [
            [determine_tile(r - extent, c - extent) for c in range(self.size)]
            for r in range(self.size)
        ]

    def grid_index(self, position: Position) -> Optional[tuple[int, int]]:
        """Grid (row, col) for a world position, or None when out of bounds."""
        if not self.is_valid(position):
            return None
        return position.row + self.extent, position.col + self.extent

    def is_valid(self, position: Position) -> bool:
        return abs(position.row) <= self.extent and abs(position.col) <= self.extent

    def tile_at(self, position: Position) -> Optional[Tile]:
        index = self.grid_index(position)
        if index is None:
            return None
        row, col = index
        return self._tiles[row][col]

    def is_walkable(self, position: Position) -> bool:
        tile = self.tile_at(position)
        return tile.walkable if tile else False

    def biome_at(self, position: Position) -> Biome:
        tile = self.tile_at(position)
        return tile.biome if tile else Biome.MIXED_FOREST

    def is_near_water(self, position: Position) -> bool:
        """True when this tile or one of its eight neighbours is lake."""
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                tile = self.tile_at(Position(position.row + dr, position.col + dc))
                if tile is not None and tile.tile_type == TileType.LAKE:
                    return True
        return False
