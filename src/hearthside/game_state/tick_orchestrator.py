"""
Tick orchestrator.

One step of the simulation, in a fixed order:
1. advance the clock by one 10-minute quantum
2. resample the regional weather, but only when tick % 10 == 0
3. update wildlife behaviour
4. burn fireplace fuel and recompute the fire state
5. ease the player's warmth (and mood) toward the environment
6. optional passive hunger and thirst, then forage node and tree regrowth

Anything inspected right after a step sees this step's fuel consumption
and a warmth value already eased toward the new target.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from hearthside.data_models import DiceRoller, Room
from hearthside.game_state.world_state import WorldState
from hearthside.observability.run_log import RunLog
from hearthside.player.vitals import environment_temperature
from hearthside.weather.weather_types import (
    WEATHER_CHANGE_PROBABILITY,
    WEATHER_UPDATE_INTERVAL,
    WeatherChange,
)
from hearthside.world.clock import MINUTES_PER_TICK
from hearthside.world.fireplace import FireState
from hearthside.world.world_map import MapView


logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """What changed during one orchestrator step."""

    tick: int
    weather_changes: list[WeatherChange] = field(default_factory=list)
    fire_before: FireState = FireState.COLD
    fire_after: FireState = FireState.COLD
    warmth: float = 0.0
    messages: list[str] = field(default_factory=list)


class TickOrchestrator:
    """Advances a WorldState one step at a time."""

    def __init__(
        self,
        world_map: MapView,
        minutes_per_tick: int = MINUTES_PER_TICK,
        passive_need_decay: float = 0.0,
        run_log: Optional[RunLog] = None,
    ):
        self.world_map = world_map
        self.minutes_per_tick = minutes_per_tick
        self.passive_need_decay = passive_need_decay
        self.run_log = run_log

    def ambient_temperature(self, world: WorldState) -> float:
        """
        Temperature the player currently feels.

        Enclosed rooms use the indoor baseline; only the cabin main room
        gets the fire's heat. The open terrace counts as indoor without
        fire heat. Outdoors it is biome base + time of day + local weather.
        """
        room = world.room
        if room is not None:
            fire_heat = world.fireplace.heat_output() if room == Room.CABIN_MAIN else 0.0
            return environment_temperature(indoor=True, fire_heat=fire_heat)

        position = world.position
        outdoor = (
            self.world_map.biome_at(position).base_temperature
            + world.clock.time_of_day().temperature_modifier
            + world.weather.weather_at(position).temperature_modifier
        )
        return environment_temperature(indoor=False, outdoor_temperature=outdoor)

    def step(self, world: WorldState, dice: DiceRoller, reason: str = "") -> TickReport:
        """Advance the world by exactly one tick."""
        old_time = world.clock.formatted()
        world.clock.advance(self.minutes_per_tick)
        report = TickReport(tick=world.clock.tick)

        if world.clock.tick % WEATHER_UPDATE_INTERVAL == 0:
            report.weather_changes = world.weather.resample(dice, WEATHER_CHANGE_PROBABILITY)

        time_of_day = world.clock.time_of_day()
        for animal in world.wildlife:
            animal.update(time_of_day, self.world_map, world.weather, dice)

        report.fire_before = world.fireplace.state
        fire_message = world.fireplace.update()
        report.fire_after = world.fireplace.state
        if fire_message:
            report.messages.append(fire_message)

        report.warmth = world.vitals.apply_comfort(self.ambient_temperature(world))

        if self.passive_need_decay > 0:
            report.messages.extend(world.vitals.apply_need_decay(self.passive_need_decay))

        for position, node in world.forage_nodes.items():
            node.tick(self.world_map.biome_at(position), dice)
        for position, tree in world.trees.items():
            if tree.tick():
                logger.debug(f"A new {tree.kind.display_name} stands at {position.key()}")

        for message in report.messages:
            world.push_message(message)

        self._log(world, report, old_time, reason)
        return report

    def advance(self, world: WorldState, dice: DiceRoller, ticks: int, reason: str = "") -> list[TickReport]:
        """Run ticks steps back to back."""
        if ticks < 0:
            raise ValueError(f"Cannot advance a negative number of ticks: {ticks}")
        return [self.step(world, dice, reason) for _ in range(ticks)]

    def _log(self, world: WorldState, report: TickReport, old_time: str, reason: str) -> None:
        logger.debug(
            f"Tick {report.tick}: {world.clock.formatted()} fire={report.fire_after.value} "
            f"fuel={world.fireplace.fuel:.1f} warmth={report.warmth:.1f}"
        )
        if self.run_log is None:
            return
        self.run_log.log_time_step(
            old_time=old_time,
            new_time=world.clock.formatted(),
            ticks_advanced=1,
            minutes_advanced=self.minutes_per_tick,
            reason=reason,
        )
        for change in report.weather_changes:
            self.run_log.log_transition(
                from_state=change.old.value,
                to_state=change.new.value,
                trigger=f"weather_{change.region.value}",
            )
        if report.fire_before != report.fire_after:
            self.run_log.log_transition(
                from_state=report.fire_before.value,
                to_state=report.fire_after.value,
                trigger="fire_burn",
            )
