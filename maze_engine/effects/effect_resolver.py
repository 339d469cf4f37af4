"""
Effect resolution.

Applies a ChoiceEffects payload to a GameState and reports what actually
changed. Clamped stats, a full inventory, missing items and unknown statuses
are anomalies recorded in the report; they never abort resolution.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional
import logging

from maze_engine.data_models import (
    ChoiceEffects,
    GameState,
    Stat,
    STAT_MAX,
    STAT_MIN,
    clamp_stat,
)
from maze_engine.effects.item_catalog import ItemCatalog
from maze_engine.effects.status_catalog import StatusCatalog
from maze_engine.errors import MazeEngineError

logger = logging.getLogger(__name__)

# Swings larger than this are logged at info level
LARGE_STAT_SWING = 20


@dataclass(frozen=True)
class StatChange:
    """Requested versus applied change to one stat."""
    requested: int
    actual: int
    old_value: int
    new_value: int

    @property
    def was_clamped(self) -> bool:
        return self.actual != self.requested

    def to_dict(self) -> dict[str, int]:
        return {
            "requested": self.requested,
            "actual": self.actual,
            "oldValue": self.old_value,
            "newValue": self.new_value,
        }


@dataclass
class EffectsApplied:
    """Report of a single effect resolution."""
    stat_changes: dict[str, StatChange] = field(default_factory=dict)
    items_gained: list[str] = field(default_factory=list)
    items_lost: list[str] = field(default_factory=list)
    status_effects_applied: list[str] = field(default_factory=list)
    status_removed: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def has_anomalies(self) -> bool:
        return bool(self.warnings or self.errors)

    def actual_deltas(self) -> dict[str, int]:
        return {name: change.actual for name, change in self.stat_changes.items()}

    def to_dict(self) -> dict[str, Any]:
        return {
            "statChanges": {name: change.to_dict() for name, change in self.stat_changes.items()},
            "itemsGained": list(self.items_gained),
            "itemsLost": list(self.items_lost),
            "statusEffectsApplied": list(self.status_effects_applied),
            "statusRemoved": list(self.status_removed),
            "warnings": list(self.warnings),
            "errors": list(self.errors),
        }


class EffectResolver:
    """
    Resolves effect payloads against a game state.

    The catalogs are injected so item names and status definitions come from
    data, not from this class.
    """

    def __init__(
        self,
        status_catalog: Optional[StatusCatalog] = None,
        item_catalog: Optional[ItemCatalog] = None,
    ):
        self.status_catalog = status_catalog or StatusCatalog.default()
        self.item_catalog = item_catalog or ItemCatalog()

    def resolve(self, effects: ChoiceEffects, game_state: GameState) -> tuple[GameState, EffectsApplied]:
        """
        Apply a ChoiceEffects payload.

        Stat changes, item gains, item losses and status applications are
        processed in that order. The turn counter advances once when the
        payload carries any stat change.

        Returns:
            Tuple of (new game state, report of what was applied)
        """
        applied = EffectsApplied()
        state = game_state

        if effects.stat_changes:
            state = self.apply_stat_changes(state, effects.stat_changes, applied)
            state = replace(state, turn_count=state.turn_count + 1)

        if effects.items_gained:
            state = self._apply_item_gains(state, effects.items_gained, applied)

        if effects.items_lost:
            state = self._apply_item_losses(state, effects.items_lost, applied)

        if effects.apply_status:
            state = self.apply_statuses(state, effects.apply_status, applied)

        for warning in applied.warnings:
            logger.warning(f"Effect resolution: {warning}")
        for error in applied.errors:
            logger.warning(f"Effect resolution error: {error}")

        return state, applied

    # =========================================================================
    # STATS
    # =========================================================================

    def apply_stat_changes(
        self,
        game_state: GameState,
        changes: Mapping[Stat, int],
        applied: EffectsApplied,
        multiplier: int = 1,
    ) -> GameState:
        """Apply clamped stat deltas, recording each into `applied`."""
        stats = game_state.stats
        for stat, delta in changes.items():
            stat = Stat.resolve(stat)
            requested = delta * multiplier
            old_value = stats.get(stat)
            raw_value = old_value + requested
            new_value = clamp_stat(raw_value)

            applied.stat_changes[stat.value] = StatChange(
                requested=requested,
                actual=new_value - old_value,
                old_value=old_value,
                new_value=new_value,
            )
            stats = stats.with_value(stat, new_value)

            if raw_value > STAT_MAX:
                applied.warnings.append(f"{stat.value} clamped to maximum ({STAT_MAX})")
            elif raw_value < STAT_MIN:
                applied.warnings.append(f"{stat.value} clamped to minimum ({STAT_MIN})")

            if abs(new_value - old_value) > LARGE_STAT_SWING:
                logger.info(f"{stat.value} changed {old_value} -> {new_value}")

        return game_state.with_stats(stats)

    # =========================================================================
    # ITEMS
    # =========================================================================

    def _apply_item_gains(self, game_state: GameState, item_ids, applied: EffectsApplied) -> GameState:
        inventory = game_state.inventory
        for item_id in item_ids:
            try:
                item = self.item_catalog.create_item(item_id)
            except (MazeEngineError, ValueError) as e:
                applied.errors.append(f"Failed to add item {item_id}: {e}")
                continue

            inventory, added = inventory.add_item(item)
            if added:
                applied.items_gained.append(item_id)
            else:
                applied.warnings.append(f"Inventory full - could not add {item_id}")

        return game_state.with_inventory(inventory)

    def _apply_item_losses(self, game_state: GameState, item_ids, applied: EffectsApplied) -> GameState:
        inventory = game_state.inventory
        for item_id in item_ids:
            inventory, removed = inventory.remove_item(item_id, 1)
            if removed:
                applied.items_lost.append(item_id)
            else:
                applied.warnings.append(f"Item {item_id} not found in inventory")

        return game_state.with_inventory(inventory)

    # =========================================================================
    # STATUS EFFECTS
    # =========================================================================

    def apply_statuses(self, game_state: GameState, status_ids, applied: EffectsApplied) -> GameState:
        """Apply statuses from the catalog, replacing any with the same id."""
        state = game_state
        for status_id in status_ids:
            try:
                effect, known = self.status_catalog.create(status_id)
            except (MazeEngineError, ValueError) as e:
                applied.errors.append(f"Failed to apply status effect {status_id}: {e}")
                continue

            if not known:
                applied.warnings.append(f"Unknown status {status_id} - applied default {effect.type.value}")
            state = state.with_status_effect(effect)
            applied.status_effects_applied.append(status_id)

        return state

    def remove_statuses(self, game_state: GameState, status_ids, applied: EffectsApplied) -> GameState:
        """Remove active statuses; ids that are not active are skipped silently."""
        state = game_state
        for status_id in status_ids:
            if state.has_status(status_id):
                state = state.without_status_effect(status_id)
                applied.status_removed.append(status_id)
        return state
