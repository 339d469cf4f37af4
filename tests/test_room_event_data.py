"""
Tests for the per-room event ledger.
"""

from maze_engine.rooms.room_event_data import EventState, RoomEventData


class TestRoomLifecycle:
    """Available -> consumed -> restored transitions."""

    def test_full_lifecycle(self):
        room = RoomEventData.empty("room_2_3")
        assert room.event_state("goblin") == EventState.ABSENT

        room = room.add_event("goblin")
        assert room.event_state("goblin") == EventState.AVAILABLE
        assert room.event_count == 1

        room = room.consume_event("goblin")
        assert room.event_state("goblin") == EventState.CONSUMED
        assert room.event_count == 0
        assert room.has_consumed_event("goblin")
        assert not room.has_available_events

        room = room.restore_event("goblin")
        assert room.event_state("goblin") == EventState.AVAILABLE
        assert room.consumed_event_ids == ()

    def test_mutators_return_new_instances(self):
        room = RoomEventData.empty("room_0_1")
        added = room.add_event("goblin")
        assert room.available_event_ids == ()
        assert added.available_event_ids == ("goblin",)

    def test_consume_unavailable_is_noop(self):
        room = RoomEventData(room_id="r", available_event_ids=("a",))
        assert room.consume_event("b") is room

    def test_restore_not_consumed_is_noop(self):
        room = RoomEventData(room_id="r", available_event_ids=("a",))
        assert room.restore_event("a") is room

    def test_add_is_idempotent(self):
        room = RoomEventData.empty("r").add_event("a").add_event("a")
        assert room.available_event_ids == ("a",)

    def test_add_consumed_id_moves_back(self):
        room = RoomEventData.empty("r").add_event("a").consume_event("a").add_event("a")
        assert room.available_event_ids == ("a",)
        assert room.consumed_event_ids == ()

    def test_remove_completely(self):
        room = RoomEventData(room_id="r", available_event_ids=("a", "b"), consumed_event_ids=("c",))
        room = room.remove_event_completely("a").remove_event_completely("c")
        assert room.available_event_ids == ("b",)
        assert room.consumed_event_ids == ()

    def test_trap_flag_is_sticky(self):
        room = RoomEventData.empty("r").add_event("pit", is_trap=True).add_event("rat")
        assert room.has_trap_event
        assert not room.is_available_for_events

        room = room.consume_event("pit")
        assert room.has_trap_event

    def test_counts(self):
        room = RoomEventData(room_id="r", available_event_ids=("a", "b"), consumed_event_ids=("c",))
        assert room.event_count == 2
        assert room.total_events_assigned == 3
        assert not room.is_empty
        assert RoomEventData.empty("r").is_empty


class TestRoomSerialization:
    """Tests for the save-layer shape."""

    def test_to_dict(self):
        room = RoomEventData(room_id="r", available_event_ids=("a",), consumed_event_ids=("b",), has_trap_event=True)
        assert room.to_dict() == {
            "roomId": "r",
            "availableEventIds": ["a"],
            "consumedEventIds": ["b"],
            "hasTrapEvent": True,
            "eventCount": 1,
        }

    def test_from_dict_ignores_stored_count(self):
        room = RoomEventData.from_dict(
            {"roomId": "r", "availableEventIds": ["a", "b"], "consumedEventIds": [], "eventCount": 7}
        )
        assert room.event_count == 2
        assert RoomEventData.from_dict(room.to_dict()) == room
