"""
Skill ledger for the Hearthside simulation core.

One mapping from skill name to {level, xp}. Entries are created lazily the
first time progress is recorded for a known skill; until then a skill
reports the seed level.

Leveling curve: xp_to_next(level) = 10 + level * 5. XP is consumed on
level-up and a single large award can jump several levels at once.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union
import logging


logger = logging.getLogger(__name__)


SEED_LEVEL = 10
MAX_LEVEL = 100
MIN_LEVEL = 1


class Skill(str, Enum):
    """Skills the ledger tracks."""

    WOODCUTTING = "woodcutting"
    FIRE_MAKING = "fire_making"
    FORAGING = "foraging"
    STONEMASONRY = "stonemasonry"
    SURVIVAL = "survival"
    TAILORING = "tailoring"
    COOKING = "cooking"
    OBSERVATION = "observation"


KNOWN_SKILLS: frozenset[str] = frozenset(skill.value for skill in Skill)


def xp_to_next(level: int) -> int:
    """XP needed to go from level to level + 1."""
    return 10 + level * 5


@dataclass
class SkillProgress:
    """Level and banked XP for one skill."""

    level: int = SEED_LEVEL
    xp: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"level": self.level, "xp": self.xp}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SkillProgress":
        level = int(data.get("level", SEED_LEVEL))
        return cls(
            level=max(MIN_LEVEL, min(MAX_LEVEL, level)),
            xp=max(0, int(data.get("xp", 0))),
        )


@dataclass
class LevelUpResult:
    """What a single improve() call did to a skill."""

    skill: str
    old_level: int
    new_level: int
    xp: int

    @property
    def levels_gained(self) -> int:
        return self.new_level - self.old_level


class SkillLedger:
    """
    Named skill progress.

    Unknown skill names are ignored by improve() and report level 0 from
    get(), so a typo never creates a phantom skill.
    """

    def __init__(self, seed_level: int = SEED_LEVEL):
        self.seed_level = seed_level
        self._skills: dict[str, SkillProgress] = {}

    @staticmethod
    def _key(skill: Union[str, Skill]) -> str:
        return skill.value if isinstance(skill, Skill) else str(skill).strip().lower()

    def is_known(self, skill: Union[str, Skill]) -> bool:
        return self._key(skill) in KNOWN_SKILLS

    def progress(self, skill: Union[str, Skill]) -> SkillProgress:
        """
        Snapshot of level and xp (a copy; mutate through improve()).

        Unseen known skills report the seed level; unknown names report 0.
        """
        if not self.is_known(skill):
            return SkillProgress(level=0, xp=0)
        progress = self._skills.get(self._key(skill))
        if progress is None:
            return SkillProgress(level=self.seed_level, xp=0)
        return SkillProgress(progress.level, progress.xp)

    def get(self, skill: Union[str, Skill]) -> int:
        """Current level of a skill."""
        return self.progress(skill).level

    def improve(self, skill: Union[str, Skill], amount: int) -> Optional[LevelUpResult]:
        """
        Bank XP and apply any level-ups it pays for.

        Args:
            skill: Skill name
            amount: XP to add (non-negative)

        Returns:
            LevelUpResult, or None when the skill name is unknown
        """
        if amount < 0:
            raise ValueError(f"XP award must be non-negative, got {amount}")
        if not self.is_known(skill):
            logger.debug(f"Ignoring XP for unknown skill '{skill}'")
            return None

        key = self._key(skill)
        progress = self._skills.setdefault(key, SkillProgress(level=self.seed_level))
        old_level = progress.level
        progress.xp += amount
        while progress.level < MAX_LEVEL and progress.xp >= xp_to_next(progress.level):
            progress.xp -= xp_to_next(progress.level)
            progress.level += 1

        if progress.level > old_level:
            logger.info(f"{key} improved from level {old_level} to {progress.level}")
        return LevelUpResult(key, old_level, progress.level, progress.xp)

    def all_levels(self) -> dict[str, int]:
        """Level of every known skill, seeded or not."""
        return {skill.value: self.get(skill) for skill in Skill}

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {name: progress.to_dict() for name, progress in self._skills.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SkillLedger":
        ledger = cls()
        for name, entry in data.items():
            key = cls._key(name)
            if key in KNOWN_SKILLS and isinstance(entry, dict):
                ledger._skills[key] = SkillProgress.from_dict(entry)
        return ledger
