"""
Combustion automaton for the cabin fireplace.

States are ordered by fuel band (Cold, Smoldering, Burning, Roaring) but
gated by ignition: fuel alone never lights the fire. Once lit, the state
tracks the fuel band every time fuel changes, and burns back down to Cold
when the fuel runs out.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
import logging


logger = logging.getLogger(__name__)


# Minimum fuel for ignite() to succeed
IGNITION_THRESHOLD = 5.0

# Fuel band upper bounds (exclusive) for the lit states
SMOLDERING_MAX_FUEL = 10.0
BURNING_MAX_FUEL = 40.0


class FireState(str, Enum):
    """Discrete burn states of the fireplace."""

    COLD = "cold"
    SMOLDERING = "smoldering"
    BURNING = "burning"
    ROARING = "roaring"

    @property
    def fuel_consumption(self) -> float:
        """Fuel burned per orchestrator tick."""
        return {
            FireState.COLD: 0.0,
            FireState.SMOLDERING: 1.0,
            FireState.BURNING: 3.0,
            FireState.ROARING: 6.0,
        }[self]

    @property
    def heat_output(self) -> float:
        return {
            FireState.COLD: 0.0,
            FireState.SMOLDERING: 5.0,
            FireState.BURNING: 15.0,
            FireState.ROARING: 25.0,
        }[self]

    @property
    def description(self) -> str:
        return {
            FireState.COLD: "cold and empty",
            FireState.SMOLDERING: "smoldering with weak flames",
            FireState.BURNING: "burning steadily",
            FireState.ROARING: "roaring with powerful flames",
        }[self]

    @property
    def is_lit(self) -> bool:
        return self != FireState.COLD


class IgnitionResult(str, Enum):
    """Why ignite() did or did not light the fire."""

    LIT = "lit"
    ALREADY_LIT = "already_lit"
    INSUFFICIENT_FUEL = "insufficient_fuel"

    @property
    def succeeded(self) -> bool:
        return self == IgnitionResult.LIT


def next_fire_state(current: FireState, fuel: float) -> FireState:
    """
    Recompute the burn state for a fuel level.

    A cold fire stays cold whatever the fuel; a lit fire follows the
    fuel bands and goes cold at zero fuel.
    """
    if fuel <= 0.0:
        return FireState.COLD
    if current == FireState.COLD:
        return FireState.COLD
    if fuel < SMOLDERING_MAX_FUEL:
        return FireState.SMOLDERING
    if fuel < BURNING_MAX_FUEL:
        return FireState.BURNING
    return FireState.ROARING


@dataclass
class Fireplace:
    """Fuel level plus burn state. Invariant: fuel >= 0 and fuel == 0 implies COLD."""

    fuel: float = 0.0
    state: FireState = FireState.COLD

    def add_fuel(self, amount: float) -> FireState:
        """
        Add fuel and recompute the state without igniting.

        Args:
            amount: Fuel units to add (non-negative)

        Returns:
            The state after the addition
        """
        if amount < 0:
            raise ValueError(f"Fuel amount must be non-negative, got {amount}")
        self.fuel += amount
        self.state = next_fire_state(self.state, self.fuel)
        return self.state

    def ignite(self) -> IgnitionResult:
        """
        Light a cold fire that holds enough fuel.

        Returns:
            LIT on success; ALREADY_LIT or INSUFFICIENT_FUEL otherwise, with
            no change to the fireplace
        """
        if self.state != FireState.COLD:
            return IgnitionResult.ALREADY_LIT
        if self.fuel < IGNITION_THRESHOLD:
            return IgnitionResult.INSUFFICIENT_FUEL
        self.state = FireState.SMOLDERING
        logger.debug(f"Fire ignited with {self.fuel:.1f} fuel")
        return IgnitionResult.LIT

    def consume(self, amount: float) -> FireState:
        """Burn off fuel (floored at zero) and recompute the state."""
        if amount < 0:
            raise ValueError(f"Consumption must be non-negative, got {amount}")
        self.fuel = max(0.0, self.fuel - amount)
        self.state = next_fire_state(self.state, self.fuel)
        return self.state

    def update(self) -> Optional[str]:
        """
        Advance one orchestrator tick.

        Returns:
            A message when the fire goes out this tick, else None
        """
        previous = self.state
        self.consume(self.state.fuel_consumption)
        if previous.is_lit and not self.state.is_lit:
            logger.info("The fire has burned out")
            return "The fire dies down, leaving only faint wisps of smoke."
        return None

    def heat_output(self) -> float:
        return self.state.heat_output

    def to_dict(self) -> dict[str, Any]:
        return {"fuel": self.fuel, "state": self.state.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Fireplace":
        fuel = max(0.0, float(data.get("fuel", 0.0)))
        state = FireState(data.get("state", FireState.COLD.value))
        return cls(fuel=fuel, state=next_fire_state(state, fuel))
