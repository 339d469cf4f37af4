"""
Tests for picking a room's event.
"""

import pytest

from maze_engine.errors import DataInconsistencyError
from maze_engine.events.event_selector import EventSelector


class TestEventSelector:
    """Tests for EventSelector.select."""

    def test_no_candidates(self, sample_catalog, seeded_dice):
        assert EventSelector(sample_catalog, seeded_dice).select([]) is None

    def test_single_candidate(self, sample_catalog, seeded_dice):
        event = EventSelector(sample_catalog, seeded_dice).select(["spike_trap"])
        assert event.id == "spike_trap"

    def test_uniform_pick_reaches_every_candidate(self, sample_catalog, seeded_dice):
        selector = EventSelector(sample_catalog, seeded_dice)
        seen = {selector.select(["treasure_chest", "lucky_coin"]).id for _ in range(200)}
        assert seen == {"treasure_chest", "lucky_coin"}

    def test_missing_event_raises(self, sample_catalog, seeded_dice):
        selector = EventSelector(sample_catalog, seeded_dice)
        with pytest.raises(DataInconsistencyError) as exc_info:
            selector.select(["treasure_chest", "vanished_event"])

        assert exc_info.value.event_id == "vanished_event"
        assert 'Event with ID "vanished_event" not found in catalog' in str(exc_info.value)

    def test_missing_event_is_lookup_error(self, sample_catalog, seeded_dice):
        with pytest.raises(LookupError):
            EventSelector(sample_catalog, seeded_dice).get_event("vanished_event")

    def test_same_seed_same_picks(self, sample_catalog):
        from maze_engine.data_models import DiceRoller

        candidates = list(sample_catalog)
        runs = []
        for _ in range(2):
            selector = EventSelector(sample_catalog, DiceRoller(seed=11))
            runs.append([selector.select(candidates).id for _ in range(20)])
        assert runs[0] == runs[1]
