"""Skill advancement."""

from hearthside.advancement.skill_ledger import (
    LevelUpResult,
    Skill,
    SkillLedger,
    SkillProgress,
    xp_to_next,
)

__all__ = [
    "LevelUpResult",
    "Skill",
    "SkillLedger",
    "SkillProgress",
    "xp_to_next",
]
