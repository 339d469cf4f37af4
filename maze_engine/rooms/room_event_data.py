"""
Per-room event ledger.

Tracks which events a room still offers and which have been consumed. Each
event id in a room is in one of three states:

    ABSENT --add_event--> AVAILABLE --consume_event--> CONSUMED
    CONSUMED --restore_event--> AVAILABLE
    any --remove_event_completely--> ABSENT

The engine never restores one-time events on its own; restore_event is an
explicit caller action meant for persistent events.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping
import logging

logger = logging.getLogger(__name__)


class EventState(str, Enum):
    """Lifecycle state of one event id within a room."""

    AVAILABLE = "available"
    CONSUMED = "consumed"
    ABSENT = "absent"


@dataclass(frozen=True)
class RoomEventData:
    """
    Immutable event ledger for one room.

    Every mutator returns a new RoomEventData. has_trap_event is sticky: once
    a trap is added it stays set, which keeps other events out of the room.
    """
    room_id: str
    available_event_ids: tuple[str, ...] = ()
    consumed_event_ids: tuple[str, ...] = ()
    has_trap_event: bool = False

    def __post_init__(self):
        object.__setattr__(self, "available_event_ids", tuple(self.available_event_ids))
        object.__setattr__(self, "consumed_event_ids", tuple(self.consumed_event_ids))

    @classmethod
    def empty(cls, room_id: str) -> "RoomEventData":
        return cls(room_id=room_id)

    @property
    def event_count(self) -> int:
        return len(self.available_event_ids)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def add_event(self, event_id: str, is_trap: bool = False) -> "RoomEventData":
        """
        Make an event available in this room.

        A consumed id is moved back to available so an id is never tracked in
        both lists. Re-adding an available id only updates the trap flag.
        """
        available = self.available_event_ids
        consumed = self.consumed_event_ids
        if event_id not in available:
            available = available + (event_id,)
            consumed = tuple(e for e in consumed if e != event_id)

        return replace(
            self,
            available_event_ids=available,
            consumed_event_ids=consumed,
            has_trap_event=self.has_trap_event or is_trap,
        )

    def consume_event(self, event_id: str) -> "RoomEventData":
        """Move an event from available to consumed. No-op if not available."""
        if event_id not in self.available_event_ids:
            return self

        consumed = self.consumed_event_ids
        if event_id not in consumed:
            consumed = consumed + (event_id,)

        logger.debug(f"Room {self.room_id}: consumed {event_id}")
        return replace(
            self,
            available_event_ids=tuple(e for e in self.available_event_ids if e != event_id),
            consumed_event_ids=consumed,
        )

    def restore_event(self, event_id: str) -> "RoomEventData":
        """Move an event from consumed back to available."""
        if event_id not in self.consumed_event_ids or event_id in self.available_event_ids:
            return self

        logger.debug(f"Room {self.room_id}: restored {event_id}")
        return replace(
            self,
            available_event_ids=self.available_event_ids + (event_id,),
            consumed_event_ids=tuple(e for e in self.consumed_event_ids if e != event_id),
        )

    def remove_event_completely(self, event_id: str) -> "RoomEventData":
        return replace(
            self,
            available_event_ids=tuple(e for e in self.available_event_ids if e != event_id),
            consumed_event_ids=tuple(e for e in self.consumed_event_ids if e != event_id),
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def event_state(self, event_id: str) -> EventState:
        if event_id in self.available_event_ids:
            return EventState.AVAILABLE
        if event_id in self.consumed_event_ids:
            return EventState.CONSUMED
        return EventState.ABSENT

    @property
    def has_available_events(self) -> bool:
        return bool(self.available_event_ids)

    @property
    def is_available_for_events(self) -> bool:
        return not self.has_trap_event

    @property
    def total_events_assigned(self) -> int:
        return len(self.available_event_ids) + len(self.consumed_event_ids)

    @property
    def is_empty(self) -> bool:
        return self.total_events_assigned == 0

    def has_event(self, event_id: str) -> bool:
        return event_id in self.available_event_ids

    def has_consumed_event(self, event_id: str) -> bool:
        return event_id in self.consumed_event_ids

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "roomId": self.room_id,
            "availableEventIds": list(self.available_event_ids),
            "consumedEventIds": list(self.consumed_event_ids),
            "hasTrapEvent": self.has_trap_event,
            "eventCount": self.event_count,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RoomEventData":
        return cls(
            room_id=data.get("roomId", ""),
            available_event_ids=tuple(data.get("availableEventIds") or ()),
            consumed_event_ids=tuple(data.get("consumedEventIds") or ()),
            has_trap_event=bool(data.get("hasTrapEvent", False)),
        )

    def __str__(self) -> str:
        return (
            f"RoomEventData(room_id={self.room_id}, available={len(self.available_event_ids)}, "
            f"consumed={len(self.consumed_event_ids)}, has_trap={self.has_trap_event})"
        )
