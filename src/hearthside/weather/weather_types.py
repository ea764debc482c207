"""
Regional weather for the Hearthside simulation core.

The world is split into four weather cells (north, south, east, west), each
tied to the biome that dominates that side of the map. Every eligible
orchestrator step each cell independently has a fixed chance to resample
from its biome's weighted candidate list.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
import logging

from hearthside.data_models import MAP_EXTENT, MAP_SIZE, Biome, DiceRoller, Position


logger = logging.getLogger(__name__)


# Per-cell chance to resample on an eligible step
WEATHER_CHANGE_PROBABILITY = 0.20

# Resampling is only eligible on ticks divisible by this
WEATHER_UPDATE_INTERVAL = 10


class WeatherCondition(str, Enum):
    """Weather conditions, each with fixed temperature and visibility modifiers."""

    CLEAR = "clear"
    CLOUDY = "cloudy"
    OVERCAST = "overcast"
    LIGHT_RAIN = "light_rain"
    HEAVY_RAIN = "heavy_rain"
    FOG = "fog"
    SANDSTORM = "sandstorm"
    HEAT_WAVE = "heat_wave"
    LIGHT_SNOW = "light_snow"
    HEAVY_SNOW = "heavy_snow"
    BLIZZARD = "blizzard"

    @property
    def temperature_modifier(self) -> float:
        return _WEATHER_MODIFIERS[self][0]

    @property
    def visibility_modifier(self) -> float:
        return _WEATHER_MODIFIERS[self][1]

    @property
    def is_severe(self) -> bool:
        """Severe weather drives animals to shelter and makes work harder."""
        return self in SEVERE_WEATHER

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ")


# condition: (temperature modifier, visibility modifier)
_WEATHER_MODIFIERS: dict[WeatherCondition, tuple[float, float]] = {
    WeatherCondition.CLEAR: (0.0, 1.0),
    WeatherCondition.CLOUDY: (-2.0, 0.9),
    WeatherCondition.OVERCAST: (-4.0, 0.7),
    WeatherCondition.LIGHT_RAIN: (-5.0, 0.6),
    WeatherCondition.HEAVY_RAIN: (-7.0, 0.3),
    WeatherCondition.FOG: (-2.0, 0.2),
    WeatherCondition.SANDSTORM: (5.0, 0.1),
    WeatherCondition.HEAT_WAVE: (10.0, 0.8),
    WeatherCondition.LIGHT_SNOW: (-3.0, 0.7),
    WeatherCondition.HEAVY_SNOW: (-8.0, 0.4),
    WeatherCondition.BLIZZARD: (-15.0, 0.1),
}

SEVERE_WEATHER: frozenset[WeatherCondition] = frozenset({
    WeatherCondition.BLIZZARD,
    WeatherCondition.HEAVY_SNOW,
    WeatherCondition.HEAVY_RAIN,
    WeatherCondition.SANDSTORM,
})


# =============================================================================
# BIOME WEATHER TABLES
# Repeated entries weight the draw.
# =============================================================================

_W = WeatherCondition

BIOME_WEATHER_TABLES: dict[Biome, list[WeatherCondition]] = {
    Biome.DESERT: [_W.CLEAR, _W.CLEAR, _W.CLEAR, _W.HEAT_WAVE, _W.SANDSTORM],
    Biome.OASIS: [_W.CLEAR, _W.CLEAR, _W.CLOUDY, _W.HEAT_WAVE],
    Biome.SPRING_FOREST: [_W.CLEAR, _W.CLOUDY, _W.OVERCAST, _W.LIGHT_RAIN, _W.FOG],
    Biome.WINTER_FOREST: [
        _W.CLEAR, _W.CLOUDY, _W.OVERCAST, _W.LIGHT_SNOW, _W.HEAVY_SNOW, _W.BLIZZARD,
    ],
    Biome.LAKE: [_W.CLEAR, _W.CLOUDY, _W.FOG],
    Biome.MIXED_FOREST: [_W.CLEAR, _W.CLOUDY, _W.OVERCAST, _W.LIGHT_RAIN, _W.FOG],
    Biome.PATH: [_W.CLEAR, _W.CLOUDY, _W.OVERCAST, _W.LIGHT_RAIN, _W.FOG],
}


def get_weather_table_for_biome(biome: Biome) -> list[WeatherCondition]:
    """Candidate list for a biome; unlisted biomes use the mixed forest table."""
    return BIOME_WEATHER_TABLES.get(biome, BIOME_WEATHER_TABLES[Biome.MIXED_FOREST])


def roll_weather(biome: Biome, dice: DiceRoller) -> WeatherCondition:
    """Draw uniformly from the biome's candidate list."""
    return dice.choice(get_weather_table_for_biome(biome), reason=f"weather ({biome.value})")


class WeatherRegion(str, Enum):
    """The four weather cells and the biome each one follows."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def biome(self) -> Biome:
        return {
            WeatherRegion.NORTH: Biome.SPRING_FOREST,
            WeatherRegion.SOUTH: Biome.MIXED_FOREST,
            WeatherRegion.EAST: Biome.WINTER_FOREST,
            WeatherRegion.WEST: Biome.DESERT,
        }[self]


def region_for_offset(row_offset: float, col_offset: float) -> WeatherRegion:
    """
    Pick the cell for an offset from the map centre.

    The axis with the larger magnitude wins; ties go to the west/east axis.
    """
    if abs(row_offset) > abs(col_offset):
        return WeatherRegion.NORTH if row_offset < 0 else WeatherRegion.SOUTH
    return WeatherRegion.WEST if col_offset < 0 else WeatherRegion.EAST


@dataclass
class WeatherChange:
    """One cell changing condition during a resample."""

    region: WeatherRegion
    old: WeatherCondition
    new: WeatherCondition


@dataclass
class WeatherField:
    """Four independently resampled regional weather cells."""

    north: WeatherCondition = WeatherCondition.CLEAR
    south: WeatherCondition = WeatherCondition.CLEAR
    east: WeatherCondition = WeatherCondition.CLEAR
    west: WeatherCondition = WeatherCondition.CLEAR

    @classmethod
    def create(cls, dice: DiceRoller) -> "WeatherField":
        """Roll an initial condition for every cell."""
        field_ = cls()
        for region in WeatherRegion:
            field_.set(region, roll_weather(region.biome, dice))
        return field_

    def get(self, region: WeatherRegion) -> WeatherCondition:
        return getattr(self, region.value)

    def set(self, region: WeatherRegion, condition: WeatherCondition) -> None:
        setattr(self, region.value, condition)

    def resample(
        self,
        dice: DiceRoller,
        probability: float = WEATHER_CHANGE_PROBABILITY,
    ) -> list[WeatherChange]:
        """
        Give each cell an independent chance to redraw its condition.

        A redraw may land on the same condition; only actual changes are
        reported.

        Returns:
            The cells whose condition changed
        """
        changes: list[WeatherChange] = []
        for region in WeatherRegion:
            if not dice.chance(probability, reason=f"weather change ({region.value})"):
                continue
            old = self.get(region)
            new = roll_weather(region.biome, dice)
            self.set(region, new)
            if new != old:
                changes.append(WeatherChange(region, old, new))
                logger.debug(f"Weather {region.value}: {old.value} -> {new.value}")
        return changes

    def weather_for_grid(self, row: int, col: int, height: int, width: Optional[int] = None) -> WeatherCondition:
        """
        Weather at a grid cell, with the centre at ((height-1)/2, (width-1)/2).

        Args:
            row: Grid row index
            col: Grid column index
            height: Number of grid rows
            width: Number of grid columns (defaults to height)
        """
        width = height if width is None else width
        center_row = (height - 1) / 2
        center_col = (width - 1) / 2
        return self.get(region_for_offset(row - center_row, col - center_col))

    def weather_at(self, position: Position) -> WeatherCondition:
        """Weather at a world position, looked up through its map grid cell."""
        return self.weather_for_grid(position.row + MAP_EXTENT, position.col + MAP_EXTENT, MAP_SIZE)

    def to_dict(self) -> dict[str, str]:
        return {region.value: self.get(region).value for region in WeatherRegion}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WeatherField":
        field_ = cls()
        for region in WeatherRegion:
            if region.value in data:
                field_.set(region, WeatherCondition(data[region.value]))
        return field_
