"""
Event selection and the choice pipeline.
"""

from maze_engine.events.event_selector import EventSelector
from maze_engine.events.empty_room import (
    EMPTY_ROOM_EVENT_ID,
    EmptyRoomEventFactory,
    adaptive_rest_changes,
    describe_rest_benefits,
    is_empty_room_event,
)
from maze_engine.events.event_processor import (
    ChoiceResult,
    EventProcessor,
    RoomEntry,
)

__all__ = [
    "EventSelector",
    "EMPTY_ROOM_EVENT_ID",
    "EmptyRoomEventFactory",
    "adaptive_rest_changes",
    "describe_rest_benefits",
    "is_empty_room_event",
    "ChoiceResult",
    "EventProcessor",
    "RoomEntry",
]
