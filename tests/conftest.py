"""
Pytest fixtures for the maze event engine test suite.

Provides seeded dice, run logs, player states and a small event catalog.
"""

from typing import Any, Optional

import pytest

from maze_engine.data_models import (
    DiceRoller,
    Event,
    GameState,
    Inventory,
    InventoryItem,
    PlayerStats,
)
from maze_engine.observability.run_log import RunLog
from maze_engine.rooms.room_event_data import RoomEventData


def build_event(
    event_id: str,
    category: str = "monster",
    persistence: str = "oneTime",
    weight: int = 10,
    choices: Optional[list[dict[str, Any]]] = None,
) -> Event:
    """Build an Event through the catalog parser."""
    return Event.from_dict(
        {
            "id": event_id,
            "name": event_id.replace("_", " ").title(),
            "description": f"You encounter {event_id}.",
            "image": f"{event_id}.png",
            "category": category,
            "weight": weight,
            "persistence": persistence,
            "choices": choices or [{"text": "Continue", "successEffects": {"description": "You move on."}}],
        }
    )


# =============================================================================
# DICE FIXTURES
# =============================================================================


@pytest.fixture
def seeded_dice():
    """Provide a seeded DiceRoller for reproducible tests."""
    return DiceRoller(seed=42)


@pytest.fixture
def run_log():
    """Provide a fresh RunLog for one test session."""
    return RunLog(seed=42)


@pytest.fixture
def logged_dice(run_log):
    """Seeded DiceRoller that records into run_log."""
    return DiceRoller(seed=42, run_log=run_log)


# =============================================================================
# STATE FIXTURES
# =============================================================================


@pytest.fixture
def initial_state():
    """A new game's state."""
    return GameState()


@pytest.fixture
def wounded_state():
    """Low stats with a key and a potion in the pack."""
    inventory = Inventory(
        items=(
            InventoryItem(id="rusty_key", name="Rusty Key"),
            InventoryItem(id="health_potion", name="Health Potion", quantity=2),
        )
    )
    return GameState(stats=PlayerStats(hp=20, san=25, fit=60, hunger=15), inventory=inventory)


@pytest.fixture
def full_inventory():
    """An inventory with every slot taken."""
    return Inventory(items=tuple(InventoryItem(id=f"item_{n}", name=f"Item {n}") for n in range(5)))


# =============================================================================
# EVENT FIXTURES
# =============================================================================


@pytest.fixture
def make_event():
    """Factory for events built from authored dicts."""
    return build_event


@pytest.fixture
def sample_catalog():
    """A small catalog covering every category and condition kind."""
    events = [
        build_event(
            "treasure_chest",
            category="item",
            choices=[
                {"text": "Open it", "successEffects": {"description": "A sword!", "itemsGained": ["sword"]}},
            ],
        ),
        build_event(
            "spike_trap",
            category="trap",
            persistence="persistent",
            choices=[
                {"text": "Jump", "successEffects": {"description": "Ouch.", "statChanges": {"HP": -10}}},
            ],
        ),
        build_event(
            "locked_gate",
            category="character",
            choices=[
                {
                    "text": "Unlock",
                    "requirements": {
                        "items": ["rusty_key"],
                        "stats": {"FITNESS": {"operator": ">=", "value": 50}},
                    },
                    "successEffects": {
                        "description": "The gate swings open.",
                        "itemsLost": ["rusty_key"],
                        "statChanges": {"SAN": 5},
                    },
                },
                {"text": "Walk away", "successEffects": {"description": "You leave the gate."}},
            ],
        ),
        build_event(
            "lucky_coin",
            category="character",
            persistence="persistent",
            choices=[
                {
                    "text": "Flip",
                    "successConditions": {"probability": 1.0},
                    "successEffects": {"description": "Heads.", "statChanges": {"SAN": 10}},
                    "failureEffects": {"description": "Tails.", "statChanges": {"SAN": -10}},
                },
            ],
        ),
        build_event(
            "cursed_idol",
            category="monster",
            choices=[
                {
                    "text": "Touch",
                    "successConditions": {"probability": 0.0},
                    "successEffects": {"description": "Warmth.", "statChanges": {"HP": 5}},
                    "failureEffects": {
                        "description": "A chill runs through you.",
                        "statChanges": {"HP": -20},
                        "applyStatus": ["curse"],
                    },
                },
                {
                    "text": "Admire",
                    "successConditions": {"probability": 0.0},
                    "successEffects": {"description": "It is beautiful.", "statChanges": {"SAN": 3}},
                },
            ],
        ),
    ]
    return {event.id: event for event in events}


@pytest.fixture
def stocked_room():
    """A room holding a one-time and a persistent event."""
    return RoomEventData(room_id="room_1_1", available_event_ids=("treasure_chest", "lucky_coin"))
