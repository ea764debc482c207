"""
Action outcomes and skill checks.

Every action reports through Outcome: success, failure, partial success
(the attempt failed but still cost something), or timed success carrying
the ticks and energy the caller must apply. There is no exception path
for gameplay results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PARTIAL_SUCCESS = "partial_success"
    TIMED = "timed"


@dataclass
class Outcome:
    """
    Result of one resolved action.

    tick_cost and energy_cost are applied by the caller: the caller steps
    the tick orchestrator tick_cost times and then deducts energy_cost.
    """

    status: OutcomeStatus
    message: str
    tick_cost: int = 0
    energy_cost: float = 0.0
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(
        cls,
        message: str,
        tick_cost: int = 0,
        energy_cost: float = 0.0,
        **details: Any,
    ) -> "Outcome":
        """A successful outcome; TIMED when it costs at least one tick."""
        status = OutcomeStatus.TIMED if tick_cost > 0 else OutcomeStatus.SUCCESS
        return cls(status, message, tick_cost, energy_cost, details)

    @classmethod
    def failure(
        cls,
        message: str,
        tick_cost: int = 0,
        energy_cost: float = 0.0,
        **details: Any,
    ) -> "Outcome":
        """A failed outcome; validation failures leave both costs at zero."""
        return cls(OutcomeStatus.FAILURE, message, tick_cost, energy_cost, details)

    @classmethod
    def partial(
        cls,
        message: str,
        tick_cost: int = 0,
        energy_cost: float = 0.0,
        **details: Any,
    ) -> "Outcome":
        return cls(OutcomeStatus.PARTIAL_SUCCESS, message, tick_cost, energy_cost, details)

    @property
    def succeeded(self) -> bool:
        return self.status in (OutcomeStatus.SUCCESS, OutcomeStatus.TIMED)

    @property
    def failed(self) -> bool:
        return self.status == OutcomeStatus.FAILURE

    @property
    def is_partial(self) -> bool:
        return self.status == OutcomeStatus.PARTIAL_SUCCESS

    def with_message(self, extra: str) -> "Outcome":
        """Append a sentence to the message in place and return self."""
        if extra:
            self.message = f"{self.message} {extra}".strip()
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "tick_cost": self.tick_cost,
            "energy_cost": self.energy_cost,
            "details": self.details,
        }


@dataclass
class SkillCheckResult:
    """
    One skill check: chance = (base + level / 2 + bonus) / 100, capped.

    roll is the uniform draw in [0, 1); the check succeeds when roll < chance.
    """

    skill: str
    level: int
    base_chance: float
    bonus: float
    chance: float
    roll: float

    @property
    def success(self) -> bool:
        return self.roll < self.chance
