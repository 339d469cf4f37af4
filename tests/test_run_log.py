"""
Tests for the per-session run log.
"""

import json

from maze_engine.data_models import DiceRoller
from maze_engine.observability.run_log import (
    ChoiceEvent,
    EventType,
    RollEvent,
    RunLog,
    SelectionEvent,
    TurnEvent,
)


class TestRunLog:
    """Tests for the RunLog class."""

    def test_log_roll_event(self, run_log):
        event = run_log.log_roll(notation="2d6", rolls=[3, 4], modifier=0, total=7, reason="test roll")

        assert event.event_type == EventType.ROLL
        assert event.rolls == [3, 4]
        assert event.total == 7
        assert event.sequence_number == 1

    def test_sequence_numbers_increase(self, run_log):
        run_log.log_selection(event_id="a", candidate_ids=["a"])
        run_log.log_choice(event_id="a", choice_index=0, choice_text="Go", success=True)
        run_log.log_turn(turn_count=1)

        assert [e.sequence_number for e in run_log.get_events()] == [1, 2, 3]
        assert run_log.get_event_count() == 3

    def test_filtering(self, run_log):
        run_log.log_roll(notation="1d6", rolls=[2], modifier=0, total=2)
        run_log.log_selection(event_id="a", candidate_ids=["a", "b"], room_id="r")
        run_log.log_roll(notation="1d6", rolls=[5], modifier=0, total=5)

        assert len(run_log.get_events(EventType.ROLL)) == 2
        assert [e.total for e in run_log.get_events(EventType.ROLL, since_sequence=1)] == [5]
        assert run_log.get_selections()[0].room_id == "r"

    def test_pause(self, run_log):
        run_log.pause()
        run_log.log_turn(turn_count=1)
        assert run_log.is_paused()
        assert run_log.get_event_count() == 0

        run_log.resume()
        run_log.log_turn(turn_count=2)
        assert run_log.get_event_count() == 1

    def test_subscribers(self, run_log):
        received = []

        def failing(event):
            raise RuntimeError("subscriber broke")

        run_log.subscribe(failing)
        run_log.subscribe(received.append)
        run_log.log_custom("door_opened", {"room": "r"})

        assert len(received) == 1
        assert received[0].context["event_name"] == "door_opened"

        run_log.unsubscribe(received.append)
        run_log.log_turn(turn_count=1)
        assert len(received) == 1

    def test_summary(self, run_log):
        run_log.log_choice(event_id="a", choice_index=0, choice_text="Go", success=True)
        run_log.log_choice(event_id="b", choice_index=1, choice_text="Stay", success=False)

        summary = run_log.get_summary()
        assert summary["choices"] == 2
        assert summary["successes"] == 1
        assert summary["seed"] == 42

    def test_reset(self, run_log):
        run_log.log_turn(turn_count=1)
        run_log.reset()
        assert run_log.get_event_count() == 0
        assert run_log.log_turn(turn_count=1).sequence_number == 1

    def test_rebuild_from_dict(self, run_log):
        run_log.log_roll(notation="1d20", rolls=[17], modifier=0, total=17, reason="r")
        run_log.log_selection(event_id="a", candidate_ids=["a"], is_empty_room=True)
        run_log.log_choice(
            event_id="a", choice_index=0, choice_text="Go", success=False, stat_changes={"HP": -5}
        )
        run_log.log_turn(turn_count=3, expired_status_ids=["curse"])

        rebuilt = RunLog.from_dict(json.loads(run_log.to_json()))
        events = rebuilt.get_events()

        assert [type(e) for e in events] == [RollEvent, SelectionEvent, ChoiceEvent, TurnEvent]
        assert events[2].stat_changes == {"HP": -5}
        assert events[3].expired_status_ids == ["curse"]
        assert rebuilt.get_seed() == 42

    def test_format_log(self, run_log):
        run_log.log_choice(event_id="goblin", choice_index=0, choice_text="Fight", success=True)
        text = run_log.format_log()
        assert "Seed: 42" in text
        assert "CHOICE goblin#0 SUCCESS" in text


class TestDiceIntegration:
    """Dice draws flow into the session's own log."""

    def test_sessions_are_isolated(self):
        first, second = RunLog(seed=1), RunLog(seed=1)
        DiceRoller(seed=1, run_log=first).randint(1, 6)

        assert first.get_event_count() == 1
        assert second.get_event_count() == 0

    def test_same_seed_same_roll_stream(self):
        streams = []
        for _ in range(2):
            log = RunLog(seed=8)
            dice = DiceRoller(seed=8, run_log=log)
            dice.roll("3d6", "stat")
            dice.randint(1, 30, "room")
            dice.choice(["a", "b", "c"], "pick")
            streams.append(log.get_roll_stream())

        assert streams[0] == streams[1]
        assert len(streams[0]) == 3

    def test_set_seed_recorded(self, run_log):
        dice = DiceRoller(run_log=run_log)
        dice.set_seed(1234)
        assert run_log.get_seed() == 1234
