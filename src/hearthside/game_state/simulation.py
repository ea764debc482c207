"""
Simulation session.

The Simulation is the single owner of the mutable WorldState. It wires the
explicitly-passed collaborators together (DiceRoller, RunLog, WorldMap,
TickOrchestrator, ActionRegistry, SessionManager) and applies action costs:
after the registry resolves an action, the orchestrator is stepped
tick_cost times and then energy_cost is deducted from the player's vitals.
Actions are handled one at a time, synchronously.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
import logging

from hearthside.config import SimulationConfig
from hearthside.conversation.action_registry import ActionRegistry, create_default_registry
from hearthside.data_models import DiceRoller
from hearthside.game_state.session_manager import SessionManager
from hearthside.game_state.tick_orchestrator import TickOrchestrator, TickReport
from hearthside.game_state.world_state import WorldState
from hearthside.observability.run_log import RunLog
from hearthside.resolution.action_resolver import ActionResolver
from hearthside.resolution.outcomes import Outcome
from hearthside.world.wildlife import animals_near
from hearthside.world.world_map import MapView, WorldMap


logger = logging.getLogger(__name__)


@dataclass
class ActionReport:
    """An action's outcome plus what happened while its time passed."""

    outcome: Outcome
    ticks: list[TickReport] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join([self.outcome.message, *self.messages])


class Simulation:
    """
    One running Hearthside session.

    Args:
        config: Session configuration
        world: Existing world; loaded or created from the save file if None
        dice: Random source; seeded from config.seed if None
        run_log: Event log; a fresh one is created if None
        world_map: Read-only map; the standard WorldMap if None
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        world: Optional[WorldState] = None,
        dice: Optional[DiceRoller] = None,
        run_log: Optional[RunLog] = None,
        world_map: Optional[MapView] = None,
    ):
        self.config = config or SimulationConfig()
        self.run_log = run_log or RunLog(seed=self.config.seed)
        self.dice = dice or DiceRoller(seed=self.config.seed)
        if self.dice.listener is None:
            self.dice.listener = self.run_log.record_dice

        self.world_map = world_map or WorldMap()
        self.sessions = SessionManager(self.config)
        self.orchestrator = TickOrchestrator(
            self.world_map,
            minutes_per_tick=self.config.minutes_per_tick,
            passive_need_decay=self.config.passive_need_decay,
            run_log=self.run_log,
        )
        self.resolver = ActionResolver(self.world_map)
        self.registry: ActionRegistry = create_default_registry(self.resolver)

        self.world = world if world is not None else self.sessions.load_or_new(self.dice)
        self.run_log.set_game_time_provider(self.world.clock.formatted)
        self.run_log.log_custom(
            "session_start",
            {"tick": self.world.clock.tick, "save_path": str(self.config.save_path)},
        )

    # =========================================================================
    # ACTIONS AND TIME
    # =========================================================================

    def perform(self, action_id: str, params: Optional[dict[str, Any]] = None) -> ActionReport:
        """
        Resolve one named action and apply its costs.

        Returns:
            ActionReport with the outcome, the tick reports for the time the
            action took and any messages raised along the way
        """
        params = params or {}
        outcome = self.registry.execute(action_id, params, self.world, self.dice)
        logger.debug(f"Action {action_id} {params}: {outcome.status.value} - {outcome.message}")

        ticks = self.orchestrator.advance(self.world, self.dice, outcome.tick_cost, reason=action_id)
        if outcome.energy_cost:
            self.world.vitals.modify_energy(-outcome.energy_cost)

        self.run_log.log_action(
            action_id=action_id,
            params={key: str(value) for key, value in params.items()},
            status=outcome.status.value,
            message=outcome.message,
            tick_cost=outcome.tick_cost,
            energy_cost=outcome.energy_cost,
        )

        if self.config.autosave and not outcome.failed:
            self.save()

        return ActionReport(outcome=outcome, ticks=ticks, messages=self.world.drain_messages())

    def tick(self, count: int = 1, reason: str = "tick") -> list[TickReport]:
        """Let time pass without an action."""
        reports = self.orchestrator.advance(self.world, self.dice, count, reason=reason)
        if self.config.autosave and count > 0:
            self.save()
        return reports

    # =========================================================================
    # QUERIES
    # =========================================================================

    def status(self) -> dict[str, Any]:
        """Snapshot of what the player can currently perceive."""
        world = self.world
        position = world.position
        nearby = animals_near(world.wildlife, position) if world.is_outdoors else []
        location = world.room.display_name if world.room else (
            f"{self.world_map.biome_at(position).display_name} ({position.row}, {position.col})"
        )
        time_of_day = world.clock.time_of_day()
        return {
            "time": world.clock.describe(),
            "light": time_of_day.light_level,
            "dark": time_of_day.is_dark,
            "location": location,
            "weather": world.weather.weather_at(position).value,
            "temperature": round(self.orchestrator.ambient_temperature(world), 1),
            "fire": world.fireplace.state.description,
            "vitals": world.vitals.status_summary(),
            "inventory": world.inventory.describe(),
            "project": world.active_project.status_description() if world.active_project else None,
            "skills": world.skills.all_levels(),
            "wildlife": [animal.describe() for animal in nearby],
        }

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def save(self, filepath: Optional[Path] = None) -> Path:
        return self.sessions.save(self.world, filepath)

    def export_run_log(self, filepath: Path) -> Path:
        return self.run_log.export_json(filepath)
