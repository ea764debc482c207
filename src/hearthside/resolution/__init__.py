"""
Action resolution.

Every player action resolves to an Outcome; the caller applies its tick and
energy costs.
"""

from hearthside.resolution.outcomes import Outcome, OutcomeStatus, SkillCheckResult
from hearthside.resolution.action_resolver import ActionResolver, first_failure

__all__ = [
    "Outcome",
    "OutcomeStatus",
    "SkillCheckResult",
    "ActionResolver",
    "first_failure",
]
