"""
Runtime configuration for a Hearthside simulation session.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from hearthside.items.inventory import DEFAULT_MAX_WEIGHT
from hearthside.world.clock import MINUTES_PER_TICK


DEFAULT_SAVE_PATH = Path("saves") / "world.json"


@dataclass
class SimulationConfig:
    """Configuration for one simulation session."""

    save_path: Path = field(default_factory=lambda: DEFAULT_SAVE_PATH)
    seed: Optional[int] = None

    # World tuning
    max_carry_weight: float = DEFAULT_MAX_WEIGHT
    minutes_per_tick: int = MINUTES_PER_TICK
    passive_need_decay: float = 0.0  # 0 disables passive hunger/thirst
    wildlife_count: int = 6

    # Runtime options
    autosave: bool = True
    verbose: bool = False

    def __post_init__(self):
        """Ensure paths are Path objects and tuning values are sane."""
        if isinstance(self.save_path, str):
            self.save_path = Path(self.save_path)
        if self.minutes_per_tick <= 0:
            raise ValueError(f"minutes_per_tick must be positive, got {self.minutes_per_tick}")
        if self.max_carry_weight <= 0:
            raise ValueError(f"max_carry_weight must be positive, got {self.max_carry_weight}")
        if self.passive_need_decay < 0:
            raise ValueError(f"passive_need_decay cannot be negative, got {self.passive_need_decay}")
        if self.wildlife_count < 0:
            raise ValueError(f"wildlife_count cannot be negative, got {self.wildlife_count}")
