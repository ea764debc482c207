"""
Pytest fixtures for the Hearthside test suite.

Provides a seeded dice roller, the standard world map, a freshly created
world and the resolver/orchestrator that act on it.
"""

import pytest

from hearthside.config import SimulationConfig
from hearthside.data_models import DiceRoller, Indoor, Room
from hearthside.game_state.tick_orchestrator import TickOrchestrator
from hearthside.game_state.world_state import WorldState
from hearthside.resolution.action_resolver import ActionResolver
from hearthside.weather.weather_types import WeatherField
from hearthside.world.world_map import WorldMap


# =============================================================================
# DICE FIXTURES
# =============================================================================


@pytest.fixture
def seeded_dice():
    """Provide a seeded DiceRoller for reproducible tests."""
    return DiceRoller(seed=42)


# =============================================================================
# WORLD FIXTURES
# =============================================================================


@pytest.fixture(scope="session")
def world_map():
    """The standard read-only map (built once; nothing mutates it)."""
    return WorldMap()


@pytest.fixture
def fresh_world(seeded_dice):
    """A newly created world with clear weather everywhere."""
    world = WorldState.create(seeded_dice)
    world.weather = WeatherField()
    return world


@pytest.fixture
def cabin_world(fresh_world):
    """Fresh world with the player standing in the cabin main room."""
    fresh_world.location = Indoor(Room.CABIN_MAIN)
    return fresh_world


@pytest.fixture
def shed_world(fresh_world):
    """Fresh world with the player in the wood shed."""
    fresh_world.location = Indoor(Room.WOOD_SHED)
    return fresh_world


# =============================================================================
# ENGINE FIXTURES
# =============================================================================


@pytest.fixture
def orchestrator(world_map):
    """Tick orchestrator with default settings and no run log."""
    return TickOrchestrator(world_map)


@pytest.fixture
def resolver(world_map):
    """Action resolver over the standard map."""
    return ActionResolver(world_map)


@pytest.fixture
def sim_config(tmp_path):
    """Simulation config saving into a temporary directory."""
    return SimulationConfig(save_path=tmp_path / "saves" / "world.json", seed=7)
