"""
Player vitals and environmental comfort.

Six wellbeing scalars, each clamped to [0, 100] by every mutator. Warmth
eases toward an environmental target a fraction at a time rather than
jumping to it, and mood takes a small nudge from how comfortable the
player is.
"""

from dataclasses import dataclass
from typing import Any, Optional


VITAL_MIN = 0.0
VITAL_MAX = 100.0

# Fraction of the gap to the target closed per tick
WARMTH_EASING = 0.1

# Comfort target = environment temperature + offset, clamped to vital range
COMFORT_OFFSET = 20.0

INDOOR_BASE_TEMPERATURE = 16.0
HEATED_INDOOR_BASE_TEMPERATURE = 18.0

COMFORT_MOOD_BONUS = 0.5
DISCOMFORT_MOOD_PENALTY = 0.5


def clamp_vital(value: float) -> float:
    return max(VITAL_MIN, min(VITAL_MAX, value))


def environment_temperature(
    indoor: bool,
    fire_heat: float = 0.0,
    outdoor_temperature: float = 0.0,
) -> float:
    """
    Ambient temperature the player feels.

    Args:
        indoor: Whether the player is inside a structure
        fire_heat: Heat reaching the player from a lit fire (0 if none)
        outdoor_temperature: Biome base + time-of-day + weather modifiers

    Returns:
        Indoor baseline (raised by fire heat) or the outdoor temperature
    """
    if indoor:
        if fire_heat > 0:
            return HEATED_INDOOR_BASE_TEMPERATURE + fire_heat
        return INDOOR_BASE_TEMPERATURE
    return outdoor_temperature


def comfort_target(temperature: float) -> float:
    """Warmth the player drifts toward at a given ambient temperature."""
    return clamp_vital(temperature + COMFORT_OFFSET)


@dataclass
class Vitals:
    """Health, warmth, energy, mood, fullness and hydration, all in [0, 100]."""

    health: float = 100.0
    warmth: float = 50.0
    energy: float = 100.0
    mood: float = 70.0
    fullness: float = 80.0
    hydration: float = 80.0

    def __post_init__(self):
        for name in ("health", "warmth", "energy", "mood", "fullness", "hydration"):
            setattr(self, name, clamp_vital(float(getattr(self, name))))

    # =========================================================================
    # MUTATORS
    # =========================================================================

    def modify_health(self, delta: float) -> float:
        self.health = clamp_vital(self.health + delta)
        return self.health

    def modify_warmth(self, delta: float) -> float:
        self.warmth = clamp_vital(self.warmth + delta)
        return self.warmth

    def modify_energy(self, delta: float) -> float:
        self.energy = clamp_vital(self.energy + delta)
        return self.energy

    def modify_mood(self, delta: float) -> float:
        self.mood = clamp_vital(self.mood + delta)
        return self.mood

    def modify_fullness(self, delta: float) -> float:
        self.fullness = clamp_vital(self.fullness + delta)
        return self.fullness

    def modify_hydration(self, delta: float) -> float:
        self.hydration = clamp_vital(self.hydration + delta)
        return self.hydration

    # =========================================================================
    # ENVIRONMENT
    # =========================================================================

    def apply_comfort(self, temperature: float) -> float:
        """
        Ease warmth toward the comfort target, then nudge mood.

        Mood rises slightly while warmth sits in the comfortable band
        (40, 60) and falls slightly below 30 or above 70.

        Args:
            temperature: Ambient temperature from environment_temperature()

        Returns:
            The new warmth
        """
        target = comfort_target(temperature)
        self.modify_warmth((target - self.warmth) * WARMTH_EASING)

        if 40.0 < self.warmth < 60.0:
            self.modify_mood(COMFORT_MOOD_BONUS)
        elif self.warmth < 30.0 or self.warmth > 70.0:
            self.modify_mood(-DISCOMFORT_MOOD_PENALTY)
        return self.warmth

    def apply_need_decay(self, amount: float) -> list[str]:
        """
        Passive hunger and thirst for one tick.

        Returns:
            Warning messages for severe hunger or thirst
        """
        messages: list[str] = []
        if amount <= 0:
            return messages
        self.modify_fullness(-amount)
        self.modify_hydration(-amount)
        if self.fullness < 20.0:
            self.modify_energy(-1.0)
            self.modify_mood(-1.0)
            if self.fullness < 10.0:
                messages.append("Your stomach growls painfully. You need to eat soon.")
        if self.hydration < 20.0:
            self.modify_energy(-1.0)
            if self.hydration < 10.0:
                self.modify_health(-0.5)
                messages.append("Your mouth is dry and your head swims. Drink water soon.")
        return messages

    # =========================================================================
    # DESCRIPTIONS
    # =========================================================================

    def comfort_description(self) -> str:
        w = self.warmth
        if w < 20.0:
            return "freezing"
        elif w < 35.0:
            return "cold"
        elif w < 45.0:
            return "slightly chilly"
        elif w < 55.0:
            return "comfortable"
        elif w < 65.0:
            return "slightly warm"
        elif w < 80.0:
            return "warm"
        return "overheating"

    def mood_description(self) -> str:
        m = self.mood
        if m < 20.0:
            return "miserable"
        elif m < 40.0:
            return "melancholy"
        elif m < 60.0:
            return "neutral"
        elif m < 80.0:
            return "content"
        return "joyful"

    def energy_description(self) -> str:
        e = self.energy
        if e < 20.0:
            return "exhausted"
        elif e < 40.0:
            return "tired"
        elif e < 60.0:
            return "slightly fatigued"
        elif e < 80.0:
            return "energetic"
        return "fully rested"

    def status_summary(self) -> str:
        return (
            f"You feel {self.comfort_description()} and {self.mood_description()}. "
            f"Your energy level is {self.energy_description()}."
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "health": self.health,
            "warmth": self.warmth,
            "energy": self.energy,
            "mood": self.mood,
            "fullness": self.fullness,
            "hydration": self.hydration,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "Vitals":
        data = data or {}
        defaults = cls()
        return cls(**{
            name: float(data.get(name, getattr(defaults, name)))
            for name in defaults.to_dict()
        })
