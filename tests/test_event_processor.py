"""
Tests for the choice pipeline: room entry, choice resolution and turns.
"""

import pytest

from maze_engine.data_models import GameState, PlayerStats, StatusEffect
from maze_engine.errors import InvalidArgumentError, RequirementsNotMetError
from maze_engine.events.empty_room import EMPTY_ROOM_EVENT_ID
from maze_engine.events.event_processor import EventProcessor
from maze_engine.rooms.room_event_data import RoomEventData


@pytest.fixture
def processor(sample_catalog, logged_dice, run_log):
    return EventProcessor(sample_catalog, logged_dice, run_log=run_log)


class TestChoiceSelection:
    """Tests for process_choice_selection."""

    def test_one_time_event_consumed(self, processor, sample_catalog, initial_state, stocked_room):
        result = processor.process_choice_selection(
            sample_catalog["treasure_chest"], 0, initial_state, stocked_room
        )

        assert result.success
        assert result.description == "A sword!"
        assert result.game_state.inventory.has_item("sword")
        assert result.room_event_data.has_consumed_event("treasure_chest")
        assert not result.room_event_data.has_event("treasure_chest")
        assert stocked_room.has_event("treasure_chest")

    def test_persistent_event_stays(self, processor, sample_catalog, initial_state, stocked_room):
        result = processor.process_choice_selection(sample_catalog["lucky_coin"], 0, initial_state, stocked_room)

        assert result.success
        assert result.room_event_data == stocked_room
        assert result.game_state.stats.san == 100

    def test_requirements_not_met(self, processor, sample_catalog, initial_state, stocked_room):
        with pytest.raises(RequirementsNotMetError) as exc_info:
            processor.process_choice_selection(sample_catalog["locked_gate"], 0, initial_state, stocked_room)

        assert exc_info.value.failure_reasons == ["Missing required item: rusty_key"]
        assert not exc_info.value.check.is_available

    def test_requirements_met(self, processor, sample_catalog, stocked_room):
        from maze_engine.data_models import Inventory, InventoryItem

        state = GameState(inventory=Inventory(items=(InventoryItem(id="rusty_key", name="Rusty Key"),)))

        result = processor.process_choice_selection(sample_catalog["locked_gate"], 0, state, stocked_room)

        assert not result.game_state.inventory.has_item("rusty_key")
        assert result.requirement_check.is_available
        assert result.effects_applied.items_lost == ["rusty_key"]

    def test_stat_requirement_blocks(self, processor, sample_catalog, wounded_state, stocked_room):
        weak = wounded_state.with_stats(PlayerStats(fit=20))
        with pytest.raises(RequirementsNotMetError) as exc_info:
            processor.process_choice_selection(sample_catalog["locked_gate"], 0, weak, stocked_room)
        assert exc_info.value.failure_reasons == ["Insufficient FIT: 20 >= 50 required"]

    @pytest.mark.parametrize("index", [-1, 2, 10])
    def test_invalid_choice_index(self, processor, sample_catalog, initial_state, stocked_room, index):
        with pytest.raises(InvalidArgumentError):
            processor.process_choice_selection(sample_catalog["locked_gate"], index, initial_state, stocked_room)

    def test_failure_effects_applied(self, processor, sample_catalog, initial_state, stocked_room):
        result = processor.process_choice_selection(sample_catalog["cursed_idol"], 0, initial_state, stocked_room)

        assert not result.success
        assert result.description == "A chill runs through you."
        assert result.game_state.stats.hp == 80
        assert result.game_state.has_status("curse")

    def test_failure_without_failure_effects_uses_success_effects(
        self, processor, sample_catalog, initial_state, stocked_room
    ):
        state = initial_state.with_stats(PlayerStats(san=50))
        result = processor.process_choice_selection(sample_catalog["cursed_idol"], 1, state, stocked_room)

        assert not result.success
        assert result.description == "It is beautiful."
        assert result.game_state.stats.san == 53

    def test_game_over_reported(self, processor, sample_catalog, stocked_room):
        state = GameState(stats=PlayerStats(hp=15))
        result = processor.process_choice_selection(sample_catalog["cursed_idol"], 0, state, stocked_room)

        assert result.game_state.is_game_over
        assert result.game_state.game_over_reason == "death"

    def test_choice_logged(self, processor, sample_catalog, initial_state, stocked_room, run_log):
        processor.process_choice_selection(sample_catalog["cursed_idol"], 0, initial_state, stocked_room)

        choices = run_log.get_choices()
        assert len(choices) == 1
        assert choices[0].event_id == "cursed_idol"
        assert choices[0].success is False
        assert choices[0].stat_changes == {"HP": -20}
        assert choices[0].context["room_id"] == "room_1_1"


class TestRoomEntry:
    """Tests for process_room_entry and display."""

    def test_entry_picks_available_event(self, processor, initial_state, stocked_room, run_log):
        entry = processor.process_room_entry(stocked_room, initial_state)

        assert entry.event.id in stocked_room.available_event_ids
        assert not entry.is_empty_room
        selection = run_log.get_selections()[0]
        assert selection.event_id == entry.event.id
        assert selection.candidate_ids == ["treasure_chest", "lucky_coin"]

    def test_empty_room_yields_rest_event(self, processor, initial_state):
        room = RoomEventData(room_id="room_3_3", consumed_event_ids=("treasure_chest",))

        entry = processor.process_room_entry(room, initial_state)

        assert entry.is_empty_room
        assert entry.event.id == EMPTY_ROOM_EVENT_ID
        assert entry.display["isEmptyRoom"]

    def test_resting_does_not_consume(self, processor, initial_state):
        room = RoomEventData.empty("room_3_3")
        state = initial_state.with_stats(PlayerStats(hp=50))
        entry = processor.process_room_entry(room, state)

        result = processor.process_choice_selection(entry.event, 0, state, room)

        assert result.room_event_data == room
        assert result.game_state.stats.hp == 53

    def test_rest_result_reports_benefits(self, processor, initial_state):
        room = RoomEventData.empty("room_3_3")
        state = initial_state.with_stats(PlayerStats(hp=50))
        entry = processor.process_room_entry(room, state)

        result = processor.process_choice_selection(entry.event, 0, state, room)

        assert result.is_rest
        assert result.rest_benefits.startswith("After resting, your wounds feel better")
        data = result.to_dict()
        assert data["actionType"] == "rest"
        assert data["isEmptyRoomAction"] is True
        assert data["restBenefits"] == result.rest_benefits

    def test_event_result_has_no_rest_benefits(self, processor, sample_catalog, initial_state, stocked_room):
        result = processor.process_choice_selection(sample_catalog["lucky_coin"], 0, initial_state, stocked_room)

        assert not result.is_rest
        assert result.rest_benefits is None
        assert "actionType" not in result.to_dict()

    def test_display_marks_unavailable_choices(self, processor, sample_catalog, initial_state):
        display = processor.display_event(sample_catalog["locked_gate"], initial_state)

        unlock, walk_away = display["choices"]
        assert unlock["isAvailable"] is False
        assert unlock["failureReasons"] == ["Missing required item: rusty_key"]
        assert walk_away["isAvailable"] is True

    def test_missing_catalog_event_propagates(self, processor, initial_state):
        from maze_engine.errors import DataInconsistencyError

        room = RoomEventData(room_id="r", available_event_ids=("not_in_catalog",))
        with pytest.raises(DataInconsistencyError):
            processor.process_room_entry(room, initial_state)


class TestRoomMaintenance:
    """Tests for consuming and restoring events."""

    def test_restore_persistent_only(self, processor):
        room = RoomEventData(room_id="r", consumed_event_ids=("spike_trap", "treasure_chest"))

        restored = processor.restore_persistent_events(room)

        assert restored.has_event("spike_trap")
        assert restored.has_consumed_event("treasure_chest")

    def test_remove_one_time_event(self, processor, stocked_room):
        room = processor.remove_one_time_event(stocked_room, "treasure_chest")
        assert room.has_consumed_event("treasure_chest")
        assert processor.remove_one_time_event(room, "lucky_coin") is room


class TestTurns:
    """Tests for process_turn."""

    def test_turn_expires_statuses(self, processor, initial_state, run_log):
        state = initial_state.with_status_effect(
            StatusEffect(id="dizziness", name="Dizzy", type="DEBUFF", remaining_duration=1)
        )

        new_state = processor.process_turn(state)

        assert not new_state.has_status("dizziness")
        assert new_state.turn_count == 1
        turn = run_log.get_events()[-1]
        assert turn.expired_status_ids == ["dizziness"]
