"""
Room event ledgers and event distribution.
"""

from maze_engine.rooms.room_event_data import RoomEventData, EventState
from maze_engine.rooms.event_distributor import EventDistributor, normalize_weight

__all__ = [
    "RoomEventData",
    "EventState",
    "EventDistributor",
    "normalize_weight",
]
