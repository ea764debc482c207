"""
World clock for the Hearthside simulation core.

Tracks day, hour, minute and the monotonic tick counter. One tick is one
orchestrator step; the orchestrator advances the clock by a fixed
10-minute quantum, but the clock itself accepts any minute delta.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


MINUTES_PER_TICK = 10


class TimeOfDay(str, Enum):
    """Eight fixed hour buckets used for lighting, temperature and behaviour."""

    DAWN = "dawn"            # 5-6
    MORNING = "morning"      # 7-10
    NOON = "noon"            # 11-13
    AFTERNOON = "afternoon"  # 14-16
    DUSK = "dusk"            # 17-18
    EVENING = "evening"      # 19-21
    NIGHT = "night"          # 22-1
    MIDNIGHT = "midnight"    # 2-4

    @classmethod
    def from_hour(cls, hour: int) -> "TimeOfDay":
        if 5 <= hour <= 6:
            return cls.DAWN
        elif 7 <= hour <= 10:
            return cls.MORNING
        elif 11 <= hour <= 13:
            return cls.NOON
        elif 14 <= hour <= 16:
            return cls.AFTERNOON
        elif 17 <= hour <= 18:
            return cls.DUSK
        elif 19 <= hour <= 21:
            return cls.EVENING
        elif hour >= 22 or hour <= 1:
            return cls.NIGHT
        return cls.MIDNIGHT

    @property
    def light_level(self) -> float:
        return _LIGHT_LEVELS[self]

    @property
    def temperature_modifier(self) -> float:
        return _TEMPERATURE_MODIFIERS[self]

    @property
    def is_dark(self) -> bool:
        return self.light_level < 0.3


_LIGHT_LEVELS: dict[TimeOfDay, float] = {
    TimeOfDay.DAWN: 0.4,
    TimeOfDay.MORNING: 0.8,
    TimeOfDay.NOON: 1.0,
    TimeOfDay.AFTERNOON: 0.9,
    TimeOfDay.DUSK: 0.5,
    TimeOfDay.EVENING: 0.2,
    TimeOfDay.NIGHT: 0.1,
    TimeOfDay.MIDNIGHT: 0.05,
}

_TEMPERATURE_MODIFIERS: dict[TimeOfDay, float] = {
    TimeOfDay.DAWN: -3.0,
    TimeOfDay.MORNING: 0.0,
    TimeOfDay.NOON: 5.0,
    TimeOfDay.AFTERNOON: 3.0,
    TimeOfDay.DUSK: -1.0,
    TimeOfDay.EVENING: -4.0,
    TimeOfDay.NIGHT: -6.0,
    TimeOfDay.MIDNIGHT: -8.0,
}


@dataclass
class Clock:
    """
    In-world time with carry-normalized hour and minute.

    Invariants:
    - 0 <= minute <= 59 and 0 <= hour <= 23 after every advance
    - tick increases by exactly one per advance, whatever the minute delta
    """

    day: int = 1
    hour: int = 8
    minute: int = 0
    tick: int = 0

    def advance(self, minutes: int = MINUTES_PER_TICK) -> int:
        """
        Advance the clock and count one tick.

        Args:
            minutes: Minutes to add (non-negative)

        Returns:
            Number of day boundaries crossed
        """
        if minutes < 0:
            raise ValueError(f"Cannot advance clock by negative minutes: {minutes}")

        total_minutes = self.minute + minutes
        self.minute = total_minutes % 60

        total_hours = self.hour + total_minutes // 60
        self.hour = total_hours % 24

        days_passed = total_hours // 24
        self.day += days_passed
        self.tick += 1
        return days_passed

    def time_of_day(self) -> TimeOfDay:
        return TimeOfDay.from_hour(self.hour)

    def formatted(self) -> str:
        return f"Day {self.day} {self.hour:02d}:{self.minute:02d}"

    def describe(self) -> str:
        """Human-readable time, e.g. 'morning (8:00 AM)'."""
        period = "AM" if self.hour < 12 else "PM"
        display_hour = self.hour % 12 or 12
        return f"{self.time_of_day().value} ({display_hour}:{self.minute:02d} {period})"

    def to_dict(self) -> dict[str, int]:
        return {"day": self.day, "hour": self.hour, "minute": self.minute, "tick": self.tick}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Clock":
        return cls(
            day=int(data.get("day", 1)),
            hour=int(data.get("hour", 8)) % 24,
            minute=int(data.get("minute", 0)) % 60,
            tick=int(data.get("tick", 0)),
        )

    def __str__(self) -> str:
        return self.formatted()
