"""
Built-in rest event for rooms with nothing left to offer.
"""

from typing import Mapping, Optional
import logging

from maze_engine.data_models import (
    Choice,
    ChoiceEffects,
    DiceRoller,
    Event,
    GameState,
    Persistence,
    Stat,
)
from maze_engine.rooms.room_event_data import RoomEventData

logger = logging.getLogger(__name__)

EMPTY_ROOM_EVENT_ID = "empty_room_rest"
REST_CHOICE_TEXT = "Take a break"

ROOM_DESCRIPTIONS = [
    "This room appears to be empty. You can take a moment to rest and gather your thoughts.",
    "The room is quiet and peaceful. It seems like a good place to catch your breath.",
    "Nothing of interest catches your eye in this room. Perhaps a short rest would be beneficial.",
    "This chamber is vacant and still. The silence offers a welcome respite from your journey.",
    "The room stands empty, its walls bearing witness to your solitary passage. Time for a brief rest.",
    "An unremarkable room with little to offer except the opportunity to pause and recover.",
]

REST_RESULT_DESCRIPTIONS = [
    "You take a moment to rest and feel slightly refreshed.",
    "A brief respite helps clear your mind and ease your fatigue.",
    "You sit down and take several deep breaths, feeling more centered.",
    "The short break allows you to gather your strength and composure.",
    "You pause to stretch and relax, feeling modestly rejuvenated.",
    "A moment of quiet reflection helps restore some of your energy.",
    "You take time to rest your weary body and calm your racing mind.",
    "The peaceful silence allows you to recover a bit of your vitality.",
]

BASE_REST_CHANGES: dict[Stat, int] = {
    Stat.HP: 3,
    Stat.SAN: 4,
    Stat.FIT: 1,
    Stat.HUNGER: -2,
}

# Stats below this recover faster while resting
CRITICAL_STAT = 30
STARVING_HUNGER = 20


def room_description_index(room_id: str) -> int:
    """
    Stable description index for a room.

    Uses the sum of code points so the same room reads the same in every
    process, unlike the salted built-in hash().
    """
    return sum(ord(ch) for ch in room_id) % len(ROOM_DESCRIPTIONS)


def adaptive_rest_changes(game_state: GameState) -> dict[Stat, int]:
    """Rest recovery tuned to the player's condition."""
    stats = game_state.stats
    hp_recovery = BASE_REST_CHANGES[Stat.HP]
    san_recovery = BASE_REST_CHANGES[Stat.SAN]
    fit_recovery = BASE_REST_CHANGES[Stat.FIT]
    hunger_cost = -BASE_REST_CHANGES[Stat.HUNGER]

    if stats.hp < CRITICAL_STAT:
        hp_recovery += 2
    if stats.san < CRITICAL_STAT:
        san_recovery += 3
    if stats.fit < CRITICAL_STAT:
        fit_recovery += 2
    if stats.hunger < STARVING_HUNGER:
        hunger_cost = 1
    if game_state.active_debuffs:
        san_recovery += 1

    return {
        Stat.HP: hp_recovery,
        Stat.SAN: san_recovery,
        Stat.FIT: fit_recovery,
        Stat.HUNGER: -hunger_cost,
    }


def describe_rest_benefits(stat_changes: Optional[Mapping[Stat, int]]) -> str:
    benefits = []
    changes = stat_changes or {}
    if changes.get(Stat.HP, 0) > 0:
        benefits.append("your wounds feel better")
    if changes.get(Stat.SAN, 0) > 0:
        benefits.append("your mind feels clearer")
    if changes.get(Stat.FIT, 0) > 0:
        benefits.append("your body feels more energized")
    if changes.get(Stat.HUNGER, 0) < 0:
        benefits.append("you feel slightly hungrier from the time spent resting")

    if not benefits:
        return "You feel refreshed from the brief rest."
    return f"After resting, {', '.join(benefits)}."


class EmptyRoomEventFactory:
    """
    Builds the persistent "Take a break" event.

    The room description depends only on the room id. The rest result text is
    drawn from the dice roller.
    """

    def __init__(self, dice: DiceRoller):
        self.dice = dice

    def room_description(self, room_event_data: Optional[RoomEventData] = None) -> str:
        if room_event_data is not None:
            return ROOM_DESCRIPTIONS[room_description_index(room_event_data.room_id)]
        return self.dice.choice(ROOM_DESCRIPTIONS, reason="empty room description")

    def rest_result_description(self) -> str:
        return self.dice.choice(REST_RESULT_DESCRIPTIONS, reason="rest result description")

    def create_event(
        self,
        room_event_data: Optional[RoomEventData] = None,
        game_state: Optional[GameState] = None,
    ) -> Event:
        """
        Build the rest event.

        With a game state the recovery adapts to low stats and active
        debuffs; otherwise the base recovery is used.
        """
        stat_changes = adaptive_rest_changes(game_state) if game_state is not None else dict(BASE_REST_CHANGES)
        event = Event(
            id=EMPTY_ROOM_EVENT_ID,
            name="Empty Room",
            description=self.room_description(room_event_data),
            image="empty_room.png",
            category="rest",
            weight=1,
            persistence=Persistence.PERSISTENT,
            choices=(
                Choice(
                    text=REST_CHOICE_TEXT,
                    success_effects=ChoiceEffects(
                        description=self.rest_result_description(),
                        stat_changes=stat_changes,
                    ),
                ),
            ),
        )
        logger.debug(f"Created empty room event with {stat_changes}")
        return event


def is_empty_room_event(event: Event) -> bool:
    return event.id == EMPTY_ROOM_EVENT_ID
