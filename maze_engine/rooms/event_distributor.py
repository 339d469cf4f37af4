"""
Event distribution across maze rooms.

Places authored events into room ledgers in three phases:

1. Traps: each trap event gets a room of its own, which then takes no other
   events.
2. Items: item events are scattered over the remaining rooms; a room may
   receive several.
3. Characters and monsters: every non-trap room draws between one and
   max_per_room events, with replacement.

Event choice within each phase is weighted by Event.weight. Room geometry is
not known here; callers pass the ids of the rooms that may hold events
(typically everything except the start and exit rooms).
"""

from types import MappingProxyType
from typing import Mapping, Optional, Sequence
import logging

from maze_engine.data_models import DiceRoller, Event
from maze_engine.errors import InvalidArgumentError
from maze_engine.rooms.room_event_data import RoomEventData

logger = logging.getLogger(__name__)

DEFAULT_WEIGHT = 10
DEFAULT_TRAP_COUNT = 10
DEFAULT_ITEM_COUNT = 15
DEFAULT_MAX_EVENTS_PER_ROOM = 20

RoomLedgers = Mapping[str, RoomEventData]


def normalize_weight(weight: int) -> int:
    """Non-positive weights count as DEFAULT_WEIGHT."""
    return weight if weight > 0 else DEFAULT_WEIGHT


class EventDistributor:
    """Weighted event selection and room assignment."""

    def __init__(self, dice: DiceRoller):
        self.dice = dice

    # =========================================================================
    # WEIGHTED SELECTION
    # =========================================================================

    def select_single_event_by_weight(self, events: Mapping[str, Event]) -> str:
        """
        Pick one event id, biased by weight.

        Draws r in [1, total weight] and returns the first id whose running
        weight total reaches r. A single candidate is returned without a draw.
        """
        if not events:
            raise InvalidArgumentError("Cannot select from empty event collection")

        ids = list(events)
        if len(ids) == 1:
            return ids[0]

        weights = [normalize_weight(events[event_id].weight) for event_id in ids]
        roll = self.dice.randint(1, sum(weights), reason="weighted event pick")

        cumulative = 0
        for event_id, weight in zip(ids, weights):
            cumulative += weight
            if roll <= cumulative:
                return event_id
        return ids[-1]

    def select_events_by_weight(self, events: Mapping[str, Event], count: int) -> list[str]:
        """
        Pick `count` distinct event ids, biased by weight.

        Raises:
            InvalidArgumentError: If count is negative or exceeds the number
                of events.
        """
        if count < 0:
            raise InvalidArgumentError(f"Count cannot be negative: {count}")
        if count > len(events):
            raise InvalidArgumentError(
                f"Cannot select {count} events from collection of {len(events)} events"
            )

        remaining = dict(events)
        selected: list[str] = []
        for _ in range(count):
            event_id = self.select_single_event_by_weight(remaining)
            selected.append(event_id)
            del remaining[event_id]

        logger.debug(f"Weighted selection picked {selected}")
        return selected

    def select_events_with_replacement(self, events: Mapping[str, Event], count: int) -> list[str]:
        if not events or count <= 0:
            return []
        return [self.select_single_event_by_weight(events) for _ in range(count)]

    def _select_rooms(self, room_ids: Sequence[str], count: int) -> list[str]:
        if count > len(room_ids):
            raise InvalidArgumentError(
                f"Cannot select {count} rooms from {len(room_ids)} available rooms"
            )
        pool = list(room_ids)
        return [pool.pop(self.dice.randrange(len(pool), reason="room pick")) for _ in range(count)]

    # =========================================================================
    # ROOM ASSIGNMENT
    # =========================================================================

    def assign_trap_events(
        self,
        room_ids: Sequence[str],
        trap_events: Mapping[str, Event],
        count: int = DEFAULT_TRAP_COUNT,
    ) -> RoomLedgers:
        """
        Start fresh ledgers for `room_ids` and place `count` traps.

        Each chosen trap goes to a different room, and that room is marked as
        holding a trap.
        """
        if not trap_events:
            raise InvalidArgumentError("No trap events available for assignment")
        if len(trap_events) < count:
            raise InvalidArgumentError(
                f"Insufficient trap events: need {count}, have {len(trap_events)}"
            )
        if len(room_ids) < count:
            raise InvalidArgumentError(
                f"Insufficient rooms for trap assignment: need {count}, have {len(room_ids)}"
            )

        ledgers = {room_id: RoomEventData.empty(room_id) for room_id in room_ids}
        trap_ids = self.select_events_by_weight(trap_events, count)
        rooms = self._select_rooms(list(room_ids), count)

        for event_id, room_id in zip(trap_ids, rooms):
            ledgers[room_id] = ledgers[room_id].add_event(event_id, is_trap=True)

        logger.info(f"Assigned {len(trap_ids)} trap events")
        return MappingProxyType(ledgers)

    def assign_item_events(
        self,
        rooms: RoomLedgers,
        item_events: Mapping[str, Event],
        count: int = DEFAULT_ITEM_COUNT,
    ) -> RoomLedgers:
        """Scatter `count` distinct item events over rooms without traps."""
        if not item_events:
            raise InvalidArgumentError("No item events available for assignment")
        if len(item_events) < count:
            raise InvalidArgumentError(
                f"Insufficient item events: need {count}, have {len(item_events)}"
            )

        open_rooms = [room_id for room_id, data in rooms.items() if data.is_available_for_events]
        if not open_rooms:
            raise InvalidArgumentError("No rooms available for item assignment")

        ledgers = dict(rooms)
        for event_id in self.select_events_by_weight(item_events, count):
            room_id = self.dice.choice(open_rooms, reason="item room pick")
            ledgers[room_id] = ledgers[room_id].add_event(event_id)

        logger.info(f"Assigned {count} item events over {len(open_rooms)} rooms")
        return MappingProxyType(ledgers)

    def assign_character_monster_events(
        self,
        rooms: RoomLedgers,
        events: Mapping[str, Event],
        max_per_room: int = DEFAULT_MAX_EVENTS_PER_ROOM,
    ) -> RoomLedgers:
        """Give every room without a trap between 1 and max_per_room draws."""
        if not events:
            raise InvalidArgumentError("No character or monster events available for assignment")
        if max_per_room < 1:
            raise InvalidArgumentError(f"max_per_room must be at least 1: {max_per_room}")

        open_rooms = [room_id for room_id, data in rooms.items() if data.is_available_for_events]
        if not open_rooms:
            raise InvalidArgumentError("No rooms available for character/monster assignment")

        ledgers = dict(rooms)
        for room_id in open_rooms:
            draws = self.dice.randint(1, max_per_room, reason=f"event count for {room_id}")
            for event_id in self.select_events_with_replacement(events, draws):
                ledgers[room_id] = ledgers[room_id].add_event(event_id)

        logger.info(f"Assigned character/monster events to {len(open_rooms)} rooms")
        return MappingProxyType(ledgers)

    def distribute(
        self,
        room_ids: Sequence[str],
        trap_events: Mapping[str, Event],
        item_events: Mapping[str, Event],
        character_monster_events: Mapping[str, Event],
        trap_count: int = DEFAULT_TRAP_COUNT,
        item_count: int = DEFAULT_ITEM_COUNT,
        max_per_room: int = DEFAULT_MAX_EVENTS_PER_ROOM,
    ) -> RoomLedgers:
        """Run all three assignment phases in order."""
        rooms = self.assign_trap_events(room_ids, trap_events, trap_count)
        rooms = self.assign_item_events(rooms, item_events, item_count)
        return self.assign_character_monster_events(rooms, character_monster_events, max_per_room)

    @staticmethod
    def summarize(rooms: RoomLedgers, room_ids: Optional[Sequence[str]] = None) -> dict[str, int]:
        """Counts useful for checking a distribution."""
        selected = [rooms[r] for r in (room_ids or rooms)]
        return {
            "rooms": len(selected),
            "trap_rooms": sum(1 for r in selected if r.has_trap_event),
            "empty_rooms": sum(1 for r in selected if r.is_empty),
            "total_events": sum(r.total_events_assigned for r in selected),
        }
