"""
Run Log for maze session tracking.

Captures every random draw, room event selection and choice resolution of a
single session so a seeded run can be inspected and compared against a replay.
Each session owns its own RunLog; nothing here is shared between sessions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Callable
import json
import logging

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of events that can be logged."""

    ROLL = "roll"  # Random draw
    SELECTION = "selection"  # Event picked for a room
    CHOICE = "choice"  # Choice resolved
    TURN = "turn"  # Status effects ticked
    CUSTOM = "custom"


@dataclass
class LogEvent:
    """Base class for all logged events."""

    # Subclasses overwrite event_type in __post_init__
    event_type: EventType = EventType.CUSTOM
    timestamp: datetime = field(default_factory=datetime.now)
    sequence_number: int = 0
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp.isoformat(),
            "sequence_number": self.sequence_number,
            "context": self.context,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LogEvent":
        return cls(
            event_type=EventType(data["event_type"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            sequence_number=data.get("sequence_number", 0),
            context=data.get("context", {}),
        )

    def __str__(self) -> str:
        name = self.context.get("event_name", self.event_type.value)
        return f"[{self.sequence_number}] {name.upper()}"


@dataclass
class RollEvent(LogEvent):
    """A random draw."""

    notation: str = ""  # e.g. "1d6", "range(1-30)", "uniform"
    rolls: list[int] = field(default_factory=list)
    modifier: int = 0
    total: int = 0
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
            timestamp=datetime.fromisoformat(data["timestamp"]),
            sequence_number=data.get("sequence_number", 0),
            context=data.get("context", {}),
            notation=data.get("notation", ""),
            rolls=data.get("rolls", []),
            modifier=data.get("modifier", 0),
            total=data.get("total", 0),
            reason=data.get("reason", ""),
        )

    def __str__(self) -> str:
        return f"[{self.sequence_number}] ROLL {self.notation}: {self.rolls} = {self.total} ({self.reason})"


@dataclass
class SelectionEvent(LogEvent):
    """An event drawn for a room."""

    room_id: Optional[str] = None
    event_id: str = ""
    candidate_ids: list[str] = field(default_factory=list)
    is_empty_room: bool = False

    def __post_init__(self):
        self.event_type = EventType.SELECTION

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "room_id": self.room_id,
                "event_id": self.event_id,
                "candidate_ids": self.candidate_ids,
                "is_empty_room": self.is_empty_room,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SelectionEvent":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            sequence_number=data.get("sequence_number", 0),
            context=data.get("context", {}),
            room_id=data.get("room_id"),
            event_id=data.get("event_id", ""),
            candidate_ids=data.get("candidate_ids", []),
            is_empty_room=data.get("is_empty_room", False),
        )

    def __str__(self) -> str:
        where = f" in {self.room_id}" if self.room_id else ""
        return f"[{self.sequence_number}] SELECT {self.event_id}{where} from {len(self.candidate_ids)} candidates"


@dataclass
class ChoiceEvent(LogEvent):
    """A resolved choice."""

    event_id: str = ""
    choice_index: int = 0
    choice_text: str = ""
    success: bool = True
    stat_changes: dict[str, int] = field(default_factory=dict)  # Actual deltas
    warnings: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.event_type = EventType.CHOICE

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "event_id": self.event_id,
                "choice_index": self.choice_index,
                "choice_text": self.choice_text,
                "success": self.success,
                "stat_changes": self.stat_changes,
                "warnings": self.warnings,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChoiceEvent":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            sequence_number=data.get("sequence_number", 0),
            context=data.get("context", {}),
            event_id=data.get("event_id", ""),
            choice_index=data.get("choice_index", 0),
            choice_text=data.get("choice_text", ""),
            success=data.get("success", True),
            stat_changes=data.get("stat_changes", {}),
            warnings=data.get("warnings", []),
        )

    def __str__(self) -> str:
        outcome = "SUCCESS" if self.success else "FAILURE"
        return f"[{self.sequence_number}] CHOICE {self.event_id}#{self.choice_index} {outcome} {self.stat_changes}"


@dataclass
class TurnEvent(LogEvent):
    """A turn tick that advanced status effect durations."""

    turn_count: int = 0
    expired_status_ids: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.event_type = EventType.TURN

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "turn_count": self.turn_count,
                "expired_status_ids": self.expired_status_ids,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TurnEvent":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            sequence_number=data.get("sequence_number", 0),
            context=data.get("context", {}),
            turn_count=data.get("turn_count", 0),
            expired_status_ids=data.get("expired_status_ids", []),
        )

    def __str__(self) -> str:
        expired = f", expired {self.expired_status_ids}" if self.expired_status_ids else ""
        return f"[{self.sequence_number}] TURN {self.turn_count}{expired}"


_EVENT_CLASSES: dict[EventType, type[LogEvent]] = {
    EventType.ROLL: RollEvent,
    EventType.SELECTION: SelectionEvent,
    EventType.CHOICE: ChoiceEvent,
    EventType.TURN: TurnEvent,
}


class RunLog:
    """
    Ordered log of everything that happened in one session.

    Events get a monotonically increasing sequence number. Subscribers are
    notified synchronously as events are logged.
    """

    def __init__(self, seed: Optional[int] = None):
        self._events: list[LogEvent] = []
        self._sequence: int = 0
        self._seed: Optional[int] = seed
        self._session_start: datetime = datetime.now()
        self._subscribers: list[Callable[[LogEvent], None]] = []
        self._paused: bool = False

    def reset(self) -> None:
        """Reset the log for a new session."""
        self._events = []
        self._sequence = 0
        self._session_start = datetime.now()
        logger.info("RunLog reset")

    def set_seed(self, seed: int) -> None:
        """Record the RNG seed used for this session."""
        self._seed = seed
        logger.info(f"RunLog seed set: {seed}")

    def get_seed(self) -> Optional[int]:
        return self._seed

    def pause(self) -> None:
        """Pause logging (e.g., during replay)."""
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def is_paused(self) -> bool:
        return self._paused

    def subscribe(self, callback: Callable[[LogEvent], None]) -> None:
        """Subscribe to receive events as they are logged."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[LogEvent], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _log_event(self, event: LogEvent) -> None:
        if self._paused:
            return

        self._sequence += 1
        event.sequence_number = self._sequence
        self._events.append(event)

        for subscriber in self._subscribers:
            try:
                subscriber(event)
            except Exception as e:
                logger.warning(f"Subscriber error: {e}")

    def log_roll(
        self,
        notation: str,
        rolls: list[int],
        modifier: int,
        total: int,
        reason: str = "",
        context: Optional[dict[str, Any]] = None,
    ) -> RollEvent:
        """Log a random draw."""
        event = RollEvent(
            notation=notation,
            rolls=list(rolls),
            modifier=modifier,
            total=total,
            reason=reason,
            context=context or {},
        )
        self._log_event(event)
        return event

    def log_selection(
        self,
        event_id: str,
        candidate_ids: list[str],
        room_id: Optional[str] = None,
        is_empty_room: bool = False,
        context: Optional[dict[str, Any]] = None,
    ) -> SelectionEvent:
        """Log the event chosen for a room."""
        event = SelectionEvent(
            room_id=room_id,
            event_id=event_id,
            candidate_ids=list(candidate_ids),
            is_empty_room=is_empty_room,
            context=context or {},
        )
        self._log_event(event)
        return event

    def log_choice(
        self,
        event_id: str,
        choice_index: int,
        choice_text: str,
        success: bool,
        stat_changes: Optional[dict[str, int]] = None,
        warnings: Optional[list[str]] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> ChoiceEvent:
        """Log a resolved choice."""
        event = ChoiceEvent(
            event_id=event_id,
            choice_index=choice_index,
            choice_text=choice_text,
            success=success,
            stat_changes=dict(stat_changes or {}),
            warnings=list(warnings or []),
            context=context or {},
        )
        self._log_event(event)
        return event

    def log_turn(
        self,
        turn_count: int,
        expired_status_ids: Optional[list[str]] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> TurnEvent:
        event = TurnEvent(
            turn_count=turn_count,
            expired_status_ids=list(expired_status_ids or []),
            context=context or {},
        )
        self._log_event(event)
        return event

    def log_custom(self, event_name: str, details: dict[str, Any]) -> LogEvent:
        """Log a custom event."""
        event = LogEvent(
            event_type=EventType.CUSTOM,
            context={"event_name": event_name, **details},
        )
        self._log_event(event)
        return event

    def get_events(
        self,
        event_type: Optional[EventType] = None,
        since_sequence: int = 0,
    ) -> list[LogEvent]:
        """
        Get logged events.

        Args:
            event_type: Filter by event type (None = all)
            since_sequence: Only events after this sequence number

        Returns:
            List of events
        """
        events = [e for e in self._events if e.sequence_number > since_sequence]
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        return events

    def get_rolls(self) -> list[RollEvent]:
        return [e for e in self._events if isinstance(e, RollEvent)]

    def get_selections(self) -> list[SelectionEvent]:
        return [e for e in self._events if isinstance(e, SelectionEvent)]

    def get_choices(self) -> list[ChoiceEvent]:
        return [e for e in self._events if isinstance(e, ChoiceEvent)]

    def get_roll_stream(self) -> list[dict[str, Any]]:
        """
        Get the roll stream for replay comparison.

        Two sessions with the same seed and inputs produce identical streams.
        """
        return [
            {
                "notation": e.notation,
                "rolls": e.rolls,
                "total": e.total,
                "reason": e.reason,
            }
            for e in self.get_rolls()
        ]

    def get_event_count(self) -> int:
        return len(self._events)

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of the run log."""
        choices = self.get_choices()
        return {
            "session_start": self._session_start.isoformat(),
            "seed": self._seed,
            "total_events": len(self._events),
            "rolls": len(self.get_rolls()),
            "selections": len(self.get_selections()),
            "choices": len(choices),
            "successes": sum(1 for c in choices if c.success),
            "last_sequence": self._sequence,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize the entire log to a dictionary."""
        return {
            "session_start": self._session_start.isoformat(),
            "seed": self._seed,
            "sequence": self._sequence,
            "events": [e.to_dict() for e in self._events],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunLog":
        """Rebuild a log from to_dict() output."""
        log = cls(seed=data.get("seed"))
        log._session_start = datetime.fromisoformat(data["session_start"])
        log._sequence = data.get("sequence", 0)

        for event_data in data.get("events", []):
            event_class = _EVENT_CLASSES.get(EventType(event_data["event_type"]), LogEvent)
            log._events.append(event_class.from_dict(event_data))

        logger.debug(f"RunLog rebuilt with {len(log._events)} events")
        return log

    def format_log(
        self,
        event_types: Optional[list[EventType]] = None,
        max_events: Optional[int] = None,
    ) -> str:
        """Format the log as a human-readable string."""
        lines = [
            "=== Run Log ===",
            f"Session: {self._session_start.isoformat()}",
            f"Seed: {self._seed if self._seed is not None else 'not set'}",
            f"Total Events: {len(self._events)}",
            "",
        ]

        events = self._events
        if event_types:
            events = [e for e in events if e.event_type in event_types]
        if max_events:
            events = events[-max_events:]

        for event in events:
            lines.append(str(event))

        return "\n".join(lines)
