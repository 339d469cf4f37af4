"""
Validation service.

Structural checks for events, room ledgers, event assignments and game
state. Checks never raise: problems come back as errors (the data must not
be used) or warnings (usable, but suspicious).

Game state can be validated either as a GameState or as a raw save dict.
Validating the raw dict catches problems the model constructors would reject
outright, such as out-of-range stats or duplicate inventory ids.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union
import logging
import re

from maze_engine.data_models import (
    DEFAULT_MAX_SLOTS,
    STAT_MAX,
    STAT_MIN,
    Event,
    GameState,
    Persistence,
    StatusType,
)
from maze_engine.rooms.room_event_data import RoomEventData

logger = logging.getLogger(__name__)

MAX_EVENT_WEIGHT = 100
MIN_RECOMMENDED_WEIGHT = 5
MAX_CHOICE_TEXT_LENGTH = 500
MAX_EVENT_DESCRIPTION_LENGTH = 1000
MAX_EVENT_NAME_LENGTH = 100
MAX_STATUS_EFFECTS = 20
MAX_STATUS_DURATION = 100
MAX_ITEM_QUANTITY = 99
MAX_EVENTS_PER_ROOM = 25
MAX_EMPTY_ROOMS = 10
LARGE_STAT_CHANGE = 50
CRITICAL_STAT_LEVEL = 10
STANDARD_CATEGORIES = ("trap", "item", "character", "monster", "rest")

_EVENT_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{3,50}$")

_STAT_LABELS = {"hp": "HP", "san": "SAN", "fit": "fitness", "hunger": "hunger"}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ValidationSeverity(str, Enum):
    PASS = "pass"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationResult:
    """Outcome of a validation pass."""
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def severity(self) -> ValidationSeverity:
        if self.errors:
            return ValidationSeverity.ERROR
        if self.warnings:
            return ValidationSeverity.WARNING
        return ValidationSeverity.PASS

    @property
    def error_summary(self) -> str:
        if not self.errors:
            return "No errors"
        return f"{len(self.errors)} error(s): {'; '.join(self.errors)}"

    @property
    def warning_summary(self) -> str:
        if not self.warnings:
            return "No warnings"
        return f"{len(self.warnings)} warning(s): {'; '.join(self.warnings)}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "severity": self.severity.value,
            "errorSummary": self.error_summary,
            "warningSummary": self.warning_summary,
        }


class ValidationService:
    """Validates engine data structures."""

    # =========================================================================
    # EVENTS
    # =========================================================================

    def validate_event(self, event: Event) -> ValidationResult:
        result = ValidationResult()
        errors, warnings = result.errors, result.warnings

        for label, value in (
            ("ID", event.id),
            ("name", event.name),
            ("description", event.description),
            ("image", event.image),
            ("category", event.category),
        ):
            if not value:
                errors.append(f"Event {label} is required")

        if not event.choices:
            errors.append("Event must have at least one choice")

        if event.id and not _EVENT_ID_PATTERN.match(event.id):
            warnings.append(f"Event ID format may not be optimal: {event.id}")

        if not isinstance(event.persistence, Persistence):
            errors.append(f"Event persistence must be oneTime or persistent: {event.persistence}")

        if len(event.description) > MAX_EVENT_DESCRIPTION_LENGTH:
            warnings.append(f"Event description is very long ({len(event.description)} characters)")
        if len(event.name) > MAX_EVENT_NAME_LENGTH:
            warnings.append(f"Event name is very long ({len(event.name)} characters)")
        if event.category and event.category.lower() not in STANDARD_CATEGORIES:
            warnings.append(f'Event category "{event.category}" is not in standard categories')

        if event.weight <= 0:
            errors.append("Event weight must be positive")
        elif event.weight > MAX_EVENT_WEIGHT:
            warnings.append(f"Event weight {event.weight} is very high (max recommended: {MAX_EVENT_WEIGHT})")
        elif event.weight < MIN_RECOMMENDED_WEIGHT:
            warnings.append(
                f"Event weight {event.weight} is very low (min recommended: {MIN_RECOMMENDED_WEIGHT})"
            )

        for number, choice in enumerate(event.choices, start=1):
            if not choice.text:
                errors.append(f"Choice {number} text is required")
            elif len(choice.text) > MAX_CHOICE_TEXT_LENGTH:
                warnings.append(f"Choice {number} text is very long ({len(choice.text)} characters)")

            if not choice.success_effects.description:
                errors.append(f"Choice {number} success effects description is required")

            for label, effects in (("success", choice.success_effects), ("failure", choice.failure_effects)):
                if effects is None:
                    continue
                for stat, delta in effects.stat_changes.items():
                    if abs(delta) > LARGE_STAT_CHANGE:
                        warnings.append(f"Choice {number} {label} effects has large stat change: {stat.value} {delta}")

        self._report("Event", event.id, result)
        return result

    # =========================================================================
    # ROOMS
    # =========================================================================

    def validate_room_event_data(self, room: RoomEventData) -> ValidationResult:
        result = ValidationResult()
        errors, warnings = result.errors, result.warnings

        if not room.room_id:
            errors.append("Room ID is required")

        if len(set(room.available_event_ids)) != len(room.available_event_ids):
            errors.append("Available event ids contain duplicates")
        if len(set(room.consumed_event_ids)) != len(room.consumed_event_ids):
            errors.append("Consumed event ids contain duplicates")

        overlap = set(room.available_event_ids) & set(room.consumed_event_ids)
        if overlap:
            errors.append(f"Events both available and consumed: {sorted(overlap)}")

        if room.consumed_event_ids and not room.available_event_ids:
            warnings.append("Room has consumed events but no available events")

        self._report("Room", room.room_id, result)
        return result

    def validate_event_assignment(
        self,
        rooms: Mapping[str, RoomEventData],
        catalog: Mapping[str, Event],
    ) -> ValidationResult:
        """Cross-check room ledgers against the event catalog."""
        result = ValidationResult()
        errors, warnings = result.errors, result.warnings

        empty_rooms = [room_id for room_id, room in rooms.items() if not room.available_event_ids]
        if len(empty_rooms) > MAX_EMPTY_ROOMS:
            warnings.append(f"Too many empty rooms: {len(empty_rooms)} (max recommended: {MAX_EMPTY_ROOMS})")

        crowded = [room_id for room_id, room in rooms.items() if room.event_count > MAX_EVENTS_PER_ROOM]
        if crowded:
            warnings.append(f"Rooms with excessive events: {', '.join(crowded)}")

        for room_id, room in rooms.items():
            for event_id in room.available_event_ids:
                if event_id not in catalog:
                    errors.append(f"Assigned event not found in catalog: {event_id} (room {room_id})")

            if room.has_trap_event and room.event_count > 1:
                warnings.append(f"Trap room {room_id} has additional events beyond trap")

        self._report("Assignment", f"{len(rooms)} rooms", result)
        return result

    # =========================================================================
    # GAME STATE
    # =========================================================================

    def validate_game_state(
        self,
        state: Union[GameState, Mapping[str, Any]],
        max_slots: Optional[int] = None,
    ) -> ValidationResult:
        result = ValidationResult()
        if isinstance(state, GameState):
            data, max_slots = state.to_dict(), state.inventory.max_slots
        else:
            data, max_slots = state, max_slots or DEFAULT_MAX_SLOTS

        self._validate_stats(data.get("stats") or {}, result)
        self._validate_inventory(data.get("inventory") or [], max_slots, result)
        self._validate_status_effects(data.get("statusEffects") or [], result)

        turn_count = data.get("turnCount", 0)
        if not _is_int(turn_count):
            result.errors.append(f"Turn count has invalid value: {turn_count!r}")
        elif turn_count < 0:
            result.errors.append(f"Turn count cannot be negative: {turn_count}")

        if data.get("currentEventId") is not None and data.get("currentEvent") is None:
            result.warnings.append("Current event ID set but no event data available")
        if data.get("currentEvent") is not None and data.get("currentEventId") is None:
            result.warnings.append("Current event data available but no event ID set")

        self._report("GameState", f"turn {turn_count}", result)
        return result

    def _validate_stats(self, stats: Mapping[str, Any], result: ValidationResult) -> None:
        for key, label in _STAT_LABELS.items():
            if key not in stats:
                continue
            value = stats[key]
            if not _is_int(value):
                result.errors.append(f"Player {label} has invalid value: {value!r}")
            elif not STAT_MIN <= value <= STAT_MAX:
                result.errors.append(f"Player {label} out of bounds: {value} (should be {STAT_MIN}-{STAT_MAX})")
            elif value <= CRITICAL_STAT_LEVEL:
                result.warnings.append(f"Player {label} is critically low: {value}")

        if stats.get("hp") == 0:
            result.warnings.append("Game is in game over state: death")
        elif stats.get("san") == 0:
            result.warnings.append("Game is in game over state: insanity")

    def _validate_inventory(
        self, items: list[Mapping[str, Any]], max_slots: int, result: ValidationResult
    ) -> None:
        if len(items) > max_slots:
            result.errors.append(f"Inventory has more items than max slots: {len(items)}/{max_slots}")

        ids = [item.get("id") for item in items]
        if len(set(ids)) != len(ids):
            result.errors.append("Duplicate items detected in inventory")

        for number, item in enumerate(items, start=1):
            if not item.get("id"):
                result.errors.append(f"Inventory item {number} has empty ID")
            if not item.get("name"):
                result.warnings.append(f"Inventory item {number} has empty name")
            quantity = item.get("quantity", 0)
            if not _is_int(quantity):
                result.errors.append(f"Inventory item {number} has invalid quantity: {quantity!r}")
            elif quantity <= 0:
                result.errors.append(f"Inventory item {number} has invalid quantity: {quantity}")
            elif quantity > MAX_ITEM_QUANTITY:
                result.warnings.append(f"Inventory item {number} has very high quantity: {quantity}")

    def _validate_status_effects(self, effects: list[Mapping[str, Any]], result: ValidationResult) -> None:
        if len(effects) > MAX_STATUS_EFFECTS:
            result.errors.append(f"Too many status effects: {len(effects)} (max: {MAX_STATUS_EFFECTS})")

        ids = [effect.get("id") for effect in effects]
        if len(set(ids)) != len(ids):
            result.errors.append("Duplicate status effects detected")

        valid_types = {t.value for t in StatusType}
        for number, effect in enumerate(effects, start=1):
            if not effect.get("id"):
                result.errors.append(f"Status effect {number} has empty ID")
            if effect.get("type") not in valid_types:
                result.errors.append(f"Status effect {number} has invalid type: {effect.get('type')}")
            duration = effect.get("remainingDuration", 0)
            if not _is_int(duration):
                result.errors.append(f"Status effect {number} has invalid duration: {duration!r}")
            elif duration < 0:
                result.errors.append(f"Status effect {number} has negative duration: {duration}")
            elif duration == 0:
                result.warnings.append(f"Status effect {number} has expired: {duration}")
            elif duration > MAX_STATUS_DURATION:
                result.warnings.append(f"Status effect {number} has very long duration: {duration}")

    def _report(self, kind: str, subject: str, result: ValidationResult) -> None:
        if result.errors:
            logger.warning(f"{kind} validation failed for {subject}: {result.error_summary}")
        elif result.warnings:
            logger.debug(f"{kind} validation warnings for {subject}: {result.warning_summary}")
