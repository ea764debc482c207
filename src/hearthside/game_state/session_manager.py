"""
Session persistence for Hearthside.

The whole WorldState is written as one pretty-printed JSON document. Loading
is forgiving: unknown keys are ignored and missing keys take defaults. A
save that cannot be read at all is replaced by a freshly created world, so a
corrupt file never stops a session from starting.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from hearthside.config import SimulationConfig
from hearthside.data_models import DiceRoller
from hearthside.game_state.world_state import SAVE_FORMAT_VERSION, WorldState


logger = logging.getLogger(__name__)


class SessionManager:
    """
    Saves and loads the world state.

    Handles:
    - Saving the world to a JSON file
    - Loading a world from a JSON file
    - Falling back to a fresh world when the save is missing or unreadable
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        """
        Initialize the session manager.

        Args:
            config: Simulation configuration; supplies the save path and the
                carry weight used when rebuilding the inventory
        """
        self.config = config or SimulationConfig()

    @property
    def save_path(self) -> Path:
        return self.config.save_path

    def save(self, world: WorldState, filepath: Optional[Union[Path, str]] = None) -> Path:
        """
        Save the world to a JSON file.

        Args:
            world: World state to save
            filepath: Target file (defaults to the configured save path)

        Returns:
            Path to the saved file
        """
        filepath = Path(filepath) if filepath else self.save_path
        filepath.parent.mkdir(parents=True, exist_ok=True)

        data = world.to_dict()
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.info(f"Saved world to: {filepath}")
        return filepath

    def load(self, filepath: Optional[Union[Path, str]] = None) -> WorldState:
        """
        Load a world from a JSON file.

        Args:
            filepath: Save file (defaults to the configured save path)

        Returns:
            Loaded WorldState

        Raises:
            FileNotFoundError: If the file does not exist
            json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError: If the
                file is not a readable save
        """
        filepath = Path(filepath) if filepath else self.save_path
        if not filepath.exists():
            raise FileNotFoundError(f"Save file not found: {filepath}")

        with open(filepath, "r", encoding="utf-8") as f:
            data: Any = json.load(f)

        if not isinstance(data, dict):
            raise TypeError(f"Save file {filepath} does not contain a JSON object")

        version = data.get("version", SAVE_FORMAT_VERSION)
        if version != SAVE_FORMAT_VERSION:
            logger.warning(f"Save file {filepath} has version {version}, expected {SAVE_FORMAT_VERSION}")

        world = WorldState.from_dict(data, max_carry_weight=self.config.max_carry_weight)
        logger.info(f"Loaded world from: {filepath} ({world.clock.formatted()})")
        return world

    def load_or_new(self, dice: DiceRoller, filepath: Optional[Union[Path, str]] = None) -> WorldState:
        """
        Load the saved world, or create a new one if that is not possible.

        Args:
            dice: Random source used if a fresh world has to be rolled
            filepath: Save file (defaults to the configured save path)

        Returns:
            The loaded world, or a freshly created one
        """
        filepath = Path(filepath) if filepath else self.save_path
        if not filepath.exists():
            logger.info(f"No save file at {filepath}; starting a new world")
            return self.new_world(dice)

        try:
            return self.load(filepath)
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Could not read save file {filepath}: {e}; starting a new world")
            return self.new_world(dice)

    def new_world(self, dice: DiceRoller) -> WorldState:
        return WorldState.create(
            dice,
            max_carry_weight=self.config.max_carry_weight,
            wildlife_count=self.config.wildlife_count,
        )
