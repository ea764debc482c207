"""
Observability for Hearthside.

Structured logging of dice rolls, time steps, state transitions and actions.
"""

from hearthside.observability.run_log import (
    ActionEvent,
    EventType,
    LogEvent,
    RollEvent,
    RunLog,
    TimeStepEvent,
    TransitionEvent,
)

__all__ = [
    "ActionEvent",
    "EventType",
    "LogEvent",
    "RollEvent",
    "RunLog",
    "TimeStepEvent",
    "TransitionEvent",
]
