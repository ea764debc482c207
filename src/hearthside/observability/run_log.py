"""
Run log for simulation event tracking.

Captures dice draws, clock steps, state transitions (fire state, weather
cells) and resolved actions as structured events. A RunLog is owned by the
Simulation that writes to it; there is no shared instance.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Union
import json
import logging

from hearthside.data_models import DiceResult


logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of events that can be logged."""

    ROLL = "roll"  # Dice draw
    TRANSITION = "transition"  # Fire state or weather cell change
    TIME_STEP = "time_step"  # Clock advancement
    ACTION = "action"  # Player action and its outcome
    CUSTOM = "custom"  # Named session event


@dataclass
class LogEvent:
    """Base class for all logged events."""

    # Subclasses set the correct value in __post_init__
    event_type: EventType = EventType.CUSTOM
    timestamp: datetime = field(default_factory=datetime.now)
    sequence_number: int = 0
    game_time: Optional[str] = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp.isoformat(),
            "sequence_number": self.sequence_number,
            "game_time": self.game_time,
            "context": self.context,
        }

    @staticmethod
    def _base_kwargs(data: dict[str, Any]) -> dict[str, Any]:
        return {
            "timestamp": datetime.fromisoformat(data["timestamp"]),
            "sequence_number": data.get("sequence_number", 0),
            "game_time": data.get("game_time"),
            "context": data.get("context", {}),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LogEvent":
        return cls(event_type=EventType(data["event_type"]), **cls._base_kwargs(data))


@dataclass
class RollEvent(LogEvent):
    """One dice draw."""

    notation: str = ""
    rolls: list[int] = field(default_factory=list)
    modifier: int = 0
    total: float = 0
    reason: str = ""

    def __post_init__(self):
        self.event_type = EventType.ROLL

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "notation": self.notation,
                "rolls": self.rolls,
                "modifier": self.modifier,
                "total": self.total,
                "reason": self.reason,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RollEvent":
        return cls(
            **cls._base_kwargs(data),
            notation=data.get("notation", ""),
            rolls=data.get("rolls", []),
            modifier=data.get("modifier", 0),
            total=data.get("total", 0),
            reason=data.get("reason", ""),
        )

    def __str__(self) -> str:
        return f"[{self.sequence_number}] ROLL {self.notation}: {self.rolls} = {self.total} ({self.reason})"


@dataclass
class TransitionEvent(LogEvent):
    """A state machine transition."""

    from_state: str = ""
    to_state: str = ""
    trigger: str = ""

    def __post_init__(self):
        self.event_type = EventType.TRANSITION

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update({"from_state": self.from_state, "to_state": self.to_state, "trigger": self.trigger})
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TransitionEvent":
        return cls(
            **cls._base_kwargs(data),
            from_state=data.get("from_state", ""),
            to_state=data.get("to_state", ""),
            trigger=data.get("trigger", ""),
        )

    def __str__(self) -> str:
        return f"[{self.sequence_number}] TRANSITION {self.from_state} -> {self.to_state} (trigger: {self.trigger})"


@dataclass
class TimeStepEvent(LogEvent):
    """A clock advancement."""

    old_time: str = ""
    new_time: str = ""
    ticks_advanced: int = 0
    minutes_advanced: int = 0
    reason: str = ""

    def __post_init__(self):
        self.event_type = EventType.TIME_STEP

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "old_time": self.old_time,
                "new_time": self.new_time,
                "ticks_advanced": self.ticks_advanced,
                "minutes_advanced": self.minutes_advanced,
                "reason": self.reason,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeStepEvent":
        return cls(
            **cls._base_kwargs(data),
            old_time=data.get("old_time", ""),
            new_time=data.get("new_time", ""),
            ticks_advanced=data.get("ticks_advanced", 0),
            minutes_advanced=data.get("minutes_advanced", 0),
            reason=data.get("reason", ""),
        )

    def __str__(self) -> str:
        return f"[{self.sequence_number}] TIME {self.old_time} -> {self.new_time} (+{self.ticks_advanced} ticks, {self.reason})"


@dataclass
class ActionEvent(LogEvent):
    """A resolved player action."""

    action_id: str = ""
    params: dict[str, Any] = field(default_factory=dict)
    status: str = ""
    message: str = ""
    tick_cost: int = 0
    energy_cost: float = 0.0

    def __post_init__(self):
        self.event_type = EventType.ACTION

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "action_id": self.action_id,
                "params": self.params,
                "status": self.status,
                "message": self.message,
                "tick_cost": self.tick_cost,
                "energy_cost": self.energy_cost,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActionEvent":
        return cls(
            **cls._base_kwargs(data),
            action_id=data.get("action_id", ""),
            params=data.get("params", {}),
            status=data.get("status", ""),
            message=data.get("message", ""),
            tick_cost=data.get("tick_cost", 0),
            energy_cost=data.get("energy_cost", 0.0),
        )

    def __str__(self) -> str:
        return f"[{self.sequence_number}] ACTION {self.action_id} {self.params} -> {self.status}"


EVENT_CLASSES: dict[EventType, type[LogEvent]] = {
    EventType.ROLL: RollEvent,
    EventType.TRANSITION: TransitionEvent,
    EventType.TIME_STEP: TimeStepEvent,
    EventType.ACTION: ActionEvent,
    EventType.CUSTOM: LogEvent,
}


def event_from_dict(data: dict[str, Any]) -> LogEvent:
    """Rebuild an event of the right subclass from its dictionary form."""
    return EVENT_CLASSES[EventType(data["event_type"])].from_dict(data)


class RunLog:
    """
    Ordered record of everything deterministic that happened in a session.

    Events get a sequence number and, when a game time provider is set, the
    in-game time at which they were logged.
    """

    def __init__(self, seed: Optional[int] = None):
        self._events: list[LogEvent] = []
        self._sequence: int = 0
        self._seed = seed
        self._session_start: datetime = datetime.now()
        self._game_time_provider: Optional[Callable[[], str]] = None

    def get_seed(self) -> Optional[int]:
        return self._seed

    def set_game_time_provider(self, provider: Callable[[], str]) -> None:
        """Set a callback returning the current in-game time string."""
        self._game_time_provider = provider

    def _log_event(self, event: LogEvent) -> None:
        self._sequence += 1
        event.sequence_number = self._sequence
        if self._game_time_provider is not None:
            event.game_time = self._game_time_provider()
        self._events.append(event)

    def log_roll(self, notation: str, rolls: list[int], modifier: int, total: float, reason: str = "") -> RollEvent:
        event = RollEvent(notation=notation, rolls=list(rolls), modifier=modifier, total=total, reason=reason)
        self._log_event(event)
        return event

    def record_dice(self, result: DiceResult) -> None:
        """Listener hook for DiceRoller: log every draw it makes."""
        self.log_roll(result.notation, result.rolls, result.modifier, result.total, result.reason)

    def log_transition(
        self,
        from_state: str,
        to_state: str,
        trigger: str,
        context: Optional[dict[str, Any]] = None,
    ) -> TransitionEvent:
        event = TransitionEvent(from_state=from_state, to_state=to_state, trigger=trigger, context=context or {})
        self._log_event(event)
        return event

    def log_time_step(
        self,
        old_time: str,
        new_time: str,
        ticks_advanced: int = 1,
        minutes_advanced: int = 0,
        reason: str = "",
    ) -> TimeStepEvent:
        event = TimeStepEvent(
            old_time=old_time,
            new_time=new_time,
            ticks_advanced=ticks_advanced,
            minutes_advanced=minutes_advanced,
            reason=reason,
        )
        self._log_event(event)
        return event

    def log_action(
        self,
        action_id: str,
        params: dict[str, Any],
        status: str,
        message: str = "",
        tick_cost: int = 0,
        energy_cost: float = 0.0,
    ) -> ActionEvent:
        event = ActionEvent(
            action_id=action_id,
            params=dict(params),
            status=status,
            message=message,
            tick_cost=tick_cost,
            energy_cost=energy_cost,
        )
        self._log_event(event)
        return event

    def log_custom(self, event_name: str, details: dict[str, Any]) -> LogEvent:
        event = LogEvent(event_type=EventType.CUSTOM, context={"event_name": event_name, **details})
        self._log_event(event)
        return event

    def get_events(self, event_type: Optional[EventType] = None, since_sequence: int = 0) -> list[LogEvent]:
        """
        Get logged events.

        Args:
            event_type: Filter by event type (None = all)
            since_sequence: Only events after this sequence number
        """
        events = [e for e in self._events if e.sequence_number > since_sequence]
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        return events

    def get_rolls(self) -> list[RollEvent]:
        return [e for e in self._events if isinstance(e, RollEvent)]

    def get_transitions(self) -> list[TransitionEvent]:
        return [e for e in self._events if isinstance(e, TransitionEvent)]

    def get_time_steps(self) -> list[TimeStepEvent]:
        return [e for e in self._events if isinstance(e, TimeStepEvent)]

    def get_actions(self) -> list[ActionEvent]:
        return [e for e in self._events if isinstance(e, ActionEvent)]

    def get_event_count(self) -> int:
        return len(self._events)

    def get_summary(self) -> dict[str, Any]:
        return {
            "session_start": self._session_start.isoformat(),
            "seed": self._seed,
            "total_events": len(self._events),
            "rolls": len(self.get_rolls()),
            "transitions": len(self.get_transitions()),
            "time_steps": len(self.get_time_steps()),
            "actions": len(self.get_actions()),
            "last_sequence": self._sequence,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_start": self._session_start.isoformat(),
            "seed": self._seed,
            "sequence": self._sequence,
            "events": [e.to_dict() for e in self._events],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunLog":
        run_log = cls(seed=data.get("seed"))
        run_log._events = [event_from_dict(entry) for entry in data.get("events", [])]
        run_log._sequence = data.get("sequence", len(run_log._events))
        if "session_start" in data:
            run_log._session_start = datetime.fromisoformat(data["session_start"])
        return run_log

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def export_json(self, filepath: Union[str, Path]) -> Path:
        """Write the log to a JSON file, creating parent directories."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_json())
        logger.info(f"RunLog saved to {path}")
        return path
