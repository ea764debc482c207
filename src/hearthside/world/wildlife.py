"""
Ambient wildlife.

Animals wander and change behaviour as time passes, but never touch the
player's vitals, inventory or the fire. The tick orchestrator updates them
once per step, between the weather and the fireplace.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any
import logging

from hearthside.data_models import Biome, DiceRoller, Direction, Position
from hearthside.weather.weather_types import WeatherField
from hearthside.world.clock import TimeOfDay
from hearthside.world.world_map import MapView


logger = logging.getLogger(__name__)


# Chance per tick that an animal re-picks its behaviour
BEHAVIOR_CHANGE_CHANCE = 0.3

# Chance an off-schedule animal sleeps rather than rests
SLEEP_CHANCE = 0.7

# Chance severe weather keeps a moving animal in place
SHELTER_CHANCE = 0.7


class ActivitySchedule(str, Enum):
    DIURNAL = "diurnal"
    NOCTURNAL = "nocturnal"
    CREPUSCULAR = "crepuscular"

    def is_active(self, time_of_day: TimeOfDay) -> bool:
        if self == ActivitySchedule.DIURNAL:
            return time_of_day in (TimeOfDay.MORNING, TimeOfDay.NOON, TimeOfDay.AFTERNOON)
        if self == ActivitySchedule.NOCTURNAL:
            return time_of_day in (TimeOfDay.NIGHT, TimeOfDay.MIDNIGHT, TimeOfDay.EVENING)
        return time_of_day in (TimeOfDay.DAWN, TimeOfDay.DUSK, TimeOfDay.MORNING, TimeOfDay.EVENING)


class Behavior(str, Enum):
    IDLE = "idle"
    SLEEPING = "sleeping"
    RESTING = "resting"
    GRAZING = "grazing"
    FORAGING = "foraging"
    HUNTING = "hunting"
    MOVING = "moving"
    ALERT = "alert"
    SWIMMING = "swimming"
    SINGING = "singing"
    BASKING = "basking"


class Species(str, Enum):
    DEER = "deer"
    RABBIT = "rabbit"
    SQUIRREL = "squirrel"
    SONGBIRD = "songbird"
    FOX = "fox"
    DESERT_LIZARD = "desert_lizard"
    SCORPION = "scorpion"
    HAWK = "hawk"
    SNOW_FOX = "snow_fox"
    OWL = "owl"
    CARIBOU = "caribou"
    DUCK = "duck"
    HERON = "heron"
    FROG = "frog"
    PIG = "pig"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ")

    @property
    def native_biomes(self) -> frozenset[Biome]:
        return _NATIVE_BIOMES[self]

    @property
    def schedule(self) -> ActivitySchedule:
        if self in (Species.OWL, Species.SCORPION):
            return ActivitySchedule.NOCTURNAL
        if self in (Species.DEER, Species.RABBIT, Species.FOX, Species.PIG):
            return ActivitySchedule.CREPUSCULAR
        return ActivitySchedule.DIURNAL

    @property
    def behaviors(self) -> list[Behavior]:
        """Weighted behaviour pool while active."""
        return _ACTIVE_BEHAVIORS.get(self, [Behavior.MOVING, Behavior.RESTING, Behavior.FORAGING])


_FOREST = frozenset({Biome.SPRING_FOREST, Biome.MIXED_FOREST})
_DRY = frozenset({Biome.DESERT, Biome.OASIS})
_WATER = frozenset({Biome.LAKE, Biome.OASIS})

_NATIVE_BIOMES: dict[Species, frozenset[Biome]] = {
    Species.DEER: _FOREST,
    Species.RABBIT: _FOREST,
    Species.SQUIRREL: _FOREST,
    Species.SONGBIRD: _FOREST,
    Species.FOX: _FOREST,
    Species.DESERT_LIZARD: _DRY,
    Species.SCORPION: _DRY,
    Species.HAWK: _DRY,
    Species.SNOW_FOX: frozenset({Biome.WINTER_FOREST}),
    Species.OWL: frozenset({Biome.WINTER_FOREST}),
    Species.CARIBOU: frozenset({Biome.WINTER_FOREST}),
    Species.DUCK: _WATER,
    Species.HERON: _WATER,
    Species.FROG: _WATER,
    Species.PIG: frozenset({Biome.PATH, Biome.CLEARING, Biome.MIXED_FOREST}),
}

_B = Behavior

_ACTIVE_BEHAVIORS: dict[Species, list[Behavior]] = {
    Species.DEER: [_B.GRAZING, _B.GRAZING, _B.MOVING, _B.ALERT, _B.RESTING],
    Species.CARIBOU: [_B.GRAZING, _B.GRAZING, _B.MOVING, _B.ALERT, _B.RESTING],
    Species.RABBIT: [_B.FORAGING, _B.FORAGING, _B.MOVING, _B.ALERT, _B.RESTING],
    Species.SQUIRREL: [_B.FORAGING, _B.FORAGING, _B.MOVING, _B.ALERT, _B.RESTING],
    Species.FOX: [_B.HUNTING, _B.MOVING, _B.RESTING, _B.ALERT],
    Species.SNOW_FOX: [_B.HUNTING, _B.MOVING, _B.RESTING, _B.ALERT],
    Species.SONGBIRD: [_B.SINGING, _B.SINGING, _B.MOVING, _B.RESTING],
    Species.FROG: [_B.SINGING, _B.SINGING, _B.MOVING, _B.RESTING],
    Species.DUCK: [_B.SWIMMING, _B.SWIMMING, _B.FORAGING, _B.RESTING],
    Species.DESERT_LIZARD: [_B.BASKING, _B.BASKING, _B.MOVING, _B.HUNTING],
    Species.HAWK: [_B.HUNTING, _B.HUNTING, _B.RESTING],
    Species.OWL: [_B.HUNTING, _B.HUNTING, _B.RESTING],
    Species.HERON: [_B.HUNTING, _B.HUNTING, _B.RESTING],
    Species.PIG: [_B.GRAZING, _B.RESTING, _B.MOVING, _B.ALERT],
}

# (species, row range, col range), both ranges inclusive
SPAWN_TABLE: list[tuple[Species, tuple[int, int], tuple[int, int]]] = [
    (Species.DEER, (-12, -5), (-4, 4)),
    (Species.DUCK, (-5, -1), (-2, 4)),
    (Species.DESERT_LIZARD, (-3, 4), (-14, -8)),
    (Species.SNOW_FOX, (-4, 4), (7, 12)),
    (Species.PIG, (1, 3), (-1, 1)),
    (Species.RABBIT, (-11, -5), (-4, 4)),
    (Species.SONGBIRD, (-10, -5), (-4, 4)),
    (Species.OWL, (-3, 3), (9, 12)),
    (Species.SCORPION, (-2, 2), (-14, -8)),
    (Species.HERON, (-5, -1), (-3, 3)),
    (Species.CARIBOU, (-3, 2), (8, 11)),
    (Species.SQUIRREL, (-10, -5), (-3, 3)),
    (Species.FOX, (-10, -5), (-4, 4)),
    (Species.HAWK, (-1, 3), (-10, -7)),
    (Species.FROG, (-5, -1), (-3, 3)),
]


@dataclass
class Wildlife:
    """One animal: species, tile and current behaviour."""

    species: Species
    position: Position
    behavior: Behavior = Behavior.IDLE

    def pick_behavior(self, time_of_day: TimeOfDay, dice: DiceRoller) -> Behavior:
        if not self.species.schedule.is_active(time_of_day):
            return Behavior.SLEEPING if dice.chance(0.8, reason="wildlife sleep") else Behavior.RESTING
        return dice.choice(self.species.behaviors, reason=f"{self.species.value} behaviour")

    def update(
        self,
        time_of_day: TimeOfDay,
        world_map: MapView,
        weather: WeatherField,
        dice: DiceRoller,
    ) -> None:
        """
        Advance one tick: maybe re-pick behaviour, then maybe step.

        Off-schedule animals and animals caught in severe weather settle
        down to rest or sleep. A moving animal steps one tile, and only
        onto a tile of one of its native biomes.
        """
        severe = weather.weather_at(self.position).is_severe

        if dice.chance(BEHAVIOR_CHANGE_CHANCE, reason="wildlife behaviour change"):
            if severe or not self.species.schedule.is_active(time_of_day):
                self.behavior = (
                    Behavior.SLEEPING if dice.chance(SLEEP_CHANCE, reason="wildlife shelter")
                    else Behavior.RESTING
                )
            else:
                self.behavior = self.pick_behavior(time_of_day, dice)

        if self.behavior != Behavior.MOVING:
            return
        if severe and dice.chance(SHELTER_CHANCE, reason="wildlife stays sheltered"):
            return

        direction = dice.choice(list(Direction), reason="wildlife direction")
        target = self.position.moved(direction)
        if world_map.is_valid(target) and world_map.biome_at(target) in self.species.native_biomes:
            self.position = target

    def describe(self) -> str:
        return f"A {self.species.display_name} is {self.behavior.value}."

    def to_dict(self) -> dict[str, Any]:
        return {
            "species": self.species.value,
            "position": self.position.to_dict(),
            "behavior": self.behavior.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Wildlife":
        return cls(
            species=Species(data["species"]),
            position=Position.from_dict(data["position"]),
            behavior=Behavior(data.get("behavior", Behavior.IDLE.value)),
        )


def spawn_wildlife(dice: DiceRoller, count: int) -> list[Wildlife]:
    """Place count animals, cycling through the spawn table."""
    animals: list[Wildlife] = []
    for i in range(max(0, count)):
        species, (row_lo, row_hi), (col_lo, col_hi) = SPAWN_TABLE[i % len(SPAWN_TABLE)]
        position = Position(
            dice.randint(row_lo, row_hi, reason="wildlife spawn row"),
            dice.randint(col_lo, col_hi, reason="wildlife spawn col"),
        )
        animals.append(Wildlife(species, position))
    logger.debug(f"Spawned {len(animals)} animals")
    return animals


def animals_near(
    animals: list[Wildlife],
    position: Position,
    radius: float = 3.0,
) -> list[Wildlife]:
    return [a for a in animals if a.position.distance_to(position) <= radius]
