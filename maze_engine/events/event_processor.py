"""
Event Processor - the choice pipeline.

Composes the rest of the engine for a room visit:

    room entry   -> pick an event from the room ledger (or the rest event)
    choice       -> check requirements -> roll for success -> resolve effects
                    -> consume one-time events from the room ledger
    turn         -> tick status effect durations

Every call is synchronous and returns new values; nothing passed in is
modified.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional
import logging

from maze_engine.conditions.requirement_evaluator import (
    RequirementCheck,
    evaluate_requirements,
)
from maze_engine.conditions.success_evaluator import SuccessEvaluator
from maze_engine.data_models import Choice, DiceRoller, Event, GameState, Persistence
from maze_engine.effects.effect_resolver import EffectResolver, EffectsApplied
from maze_engine.effects.item_catalog import ItemCatalog
from maze_engine.effects.status_catalog import StatusCatalog
from maze_engine.errors import InvalidArgumentError, RequirementsNotMetError
from maze_engine.events.empty_room import (
    EmptyRoomEventFactory,
    describe_rest_benefits,
    is_empty_room_event,
)
from maze_engine.events.event_selector import EventSelector
from maze_engine.observability.run_log import RunLog
from maze_engine.rooms.room_event_data import RoomEventData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChoiceResult:
    """Everything the presentation layer needs after a choice."""
    game_state: GameState
    room_event_data: RoomEventData
    description: str
    success: bool
    effects_applied: EffectsApplied
    choice_text: str
    requirement_check: RequirementCheck
    rest_benefits: Optional[str] = None

    @property
    def is_rest(self) -> bool:
        return self.rest_benefits is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "gameState": self.game_state.to_dict(),
            "roomEventData": self.room_event_data.to_dict(),
            "description": self.description,
            "success": self.success,
            "effectsApplied": self.effects_applied.to_dict(),
            "choiceText": self.choice_text,
            "requirementCheck": self.requirement_check.to_dict(),
        }
        if self.is_rest:
            data["actionType"] = "rest"
            data["isEmptyRoomAction"] = True
            data["restBenefits"] = self.rest_benefits
        return data


@dataclass(frozen=True)
class RoomEntry:
    """The event met on entering a room."""
    event: Event
    room_event_data: RoomEventData
    display: dict[str, Any]
    is_empty_room: bool


class EventProcessor:
    """
    Runs room entries and choice selections against an event catalog.

    The dice roller is the only source of randomness. A RunLog, when given,
    records selections, choices and turns for this session.
    """

    def __init__(
        self,
        catalog: Mapping[str, Event],
        dice: DiceRoller,
        status_catalog: Optional[StatusCatalog] = None,
        item_catalog: Optional[ItemCatalog] = None,
        run_log: Optional[RunLog] = None,
    ):
        self.catalog = catalog
        self.dice = dice
        self.run_log = run_log
        self.selector = EventSelector(catalog, dice)
        self.success_evaluator = SuccessEvaluator(dice)
        self.resolver = EffectResolver(status_catalog=status_catalog, item_catalog=item_catalog)
        self.empty_room = EmptyRoomEventFactory(dice)

    # =========================================================================
    # CHOICES
    # =========================================================================

    def check_requirements(self, choice: Choice, game_state: GameState) -> RequirementCheck:
        return evaluate_requirements(choice.requirements, game_state)

    def evaluate_success(self, choice: Choice, game_state: GameState) -> bool:
        return self.success_evaluator.evaluate(choice.success_conditions, game_state)

    def _get_choice(self, event: Event, choice_index: int) -> Choice:
        if not 0 <= choice_index < len(event.choices):
            message = (
                f"Invalid choice index {choice_index} for event {event.id} "
                f"with {len(event.choices)} choices"
            )
            logger.error(message)
            raise InvalidArgumentError(message)
        return event.choices[choice_index]

    def process_choice_selection(
        self,
        event: Event,
        choice_index: int,
        game_state: GameState,
        room_event_data: RoomEventData,
    ) -> ChoiceResult:
        """
        Resolve a player's choice.

        Raises:
            InvalidArgumentError: If choice_index is out of range
            RequirementsNotMetError: If the choice's requirements do not hold
        """
        choice = self._get_choice(event, choice_index)

        check = self.check_requirements(choice, game_state)
        if not check.is_available:
            message = f"Choice requirements not met: {', '.join(check.failure_reasons)}"
            logger.error(f"{event.id}#{choice_index}: {message}")
            raise RequirementsNotMetError(message, check)

        success = self.evaluate_success(choice, game_state)
        effects = choice.success_effects
        if not success and choice.failure_effects is not None:
            effects = choice.failure_effects

        new_state, applied = self.resolver.resolve(effects, game_state)

        new_room = room_event_data
        if event.persistence == Persistence.ONE_TIME:
            new_room = room_event_data.consume_event(event.id)

        if new_state.is_game_over and not game_state.is_game_over:
            logger.info(f"Game over after {event.id}: {new_state.game_over_reason}")

        if self.run_log is not None:
            self.run_log.log_choice(
                event_id=event.id,
                choice_index=choice_index,
                choice_text=choice.text,
                success=success,
                stat_changes=applied.actual_deltas(),
                warnings=applied.warnings,
                context={"room_id": room_event_data.room_id},
            )

        rest_benefits = None
        if is_empty_room_event(event):
            rest_benefits = describe_rest_benefits(effects.stat_changes)

        return ChoiceResult(
            game_state=new_state,
            room_event_data=new_room,
            description=effects.description,
            success=success,
            effects_applied=applied,
            choice_text=choice.text,
            requirement_check=check,
            rest_benefits=rest_benefits,
        )

    # =========================================================================
    # ROOMS
    # =========================================================================

    def is_room_empty(self, room_event_data: RoomEventData) -> bool:
        return not room_event_data.has_available_events

    def process_room_entry(self, room_event_data: RoomEventData, game_state: GameState) -> RoomEntry:
        """
        Pick the event for a room visit.

        Rooms with nothing available yield the built-in rest event, adapted
        to the player's current state.
        """
        is_empty = self.is_room_empty(room_event_data)
        if is_empty:
            event = self.empty_room.create_event(room_event_data, game_state)
        else:
            event = self.selector.select(room_event_data.available_event_ids)

        if self.run_log is not None:
            self.run_log.log_selection(
                event_id=event.id,
                candidate_ids=list(room_event_data.available_event_ids),
                room_id=room_event_data.room_id,
                is_empty_room=is_empty,
            )

        return RoomEntry(
            event=event,
            room_event_data=room_event_data,
            display=self.display_event(event, game_state),
            is_empty_room=is_empty,
        )

    def display_event(self, event: Event, game_state: GameState) -> dict[str, Any]:
        """Event data for rendering, with per-choice availability."""
        choices = []
        for index, choice in enumerate(event.choices):
            check = self.check_requirements(choice, game_state)
            choices.append(
                {
                    "index": index,
                    "text": choice.text,
                    "isAvailable": check.is_available,
                    "failureReasons": list(check.failure_reasons),
                }
            )

        return {
            "eventId": event.id,
            "name": event.name,
            "description": event.description,
            "image": event.image,
            "category": event.category,
            "isEmptyRoom": is_empty_room_event(event),
            "choices": choices,
        }

    def remove_one_time_event(self, room_event_data: RoomEventData, event_id: str) -> RoomEventData:
        event = self.catalog.get(event_id)
        if event is not None and event.is_one_time:
            return room_event_data.consume_event(event_id)
        return room_event_data

    def restore_persistent_events(self, room_event_data: RoomEventData) -> RoomEventData:
        """Make consumed persistent events available again. One-time events stay consumed."""
        room = room_event_data
        for event_id in room_event_data.consumed_event_ids:
            event = self.catalog.get(event_id)
            if event is not None and event.persistence == Persistence.PERSISTENT:
                room = room.restore_event(event_id)
        return room

    # =========================================================================
    # TURNS
    # =========================================================================

    def process_turn(self, game_state: GameState) -> GameState:
        """Tick status effect durations and drop the expired ones."""
        new_state = game_state.process_turn()
        remaining = {e.id for e in new_state.status_effects}
        expired = [e.id for e in game_state.status_effects if e.id not in remaining]
        if expired:
            logger.debug(f"Status effects expired: {expired}")

        if self.run_log is not None:
            self.run_log.log_turn(turn_count=new_state.turn_count, expired_status_ids=expired)
        return new_state
