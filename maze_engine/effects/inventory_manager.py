"""
Inventory manager.

Lists usable items and applies an item's effects when the player uses it.
Stat changes are scaled by the quantity used; consumable items leave the
inventory afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
import logging

from maze_engine.data_models import GameState
from maze_engine.effects.effect_resolver import EffectResolver, EffectsApplied
from maze_engine.effects.item_catalog import ItemCatalog, ItemDefinition
from maze_engine.effects.status_catalog import StatusCatalog

logger = logging.getLogger(__name__)


@dataclass
class ItemUseResult:
    """Outcome of using an item."""
    success: bool
    game_state: GameState
    effects_applied: EffectsApplied = field(default_factory=EffectsApplied)
    description: str = ""
    item_consumed: bool = False

    @property
    def errors(self) -> list[str]:
        return self.effects_applied.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "gameState": self.game_state.to_dict(),
            "effectsApplied": self.effects_applied.to_dict(),
            "description": self.description,
            "itemConsumed": self.item_consumed,
        }


class InventoryManager:
    """Item display and item use."""

    def __init__(
        self,
        item_catalog: Optional[ItemCatalog] = None,
        status_catalog: Optional[StatusCatalog] = None,
    ):
        self.item_catalog = item_catalog or ItemCatalog.default()
        self.resolver = EffectResolver(status_catalog=status_catalog, item_catalog=self.item_catalog)

    def display_inventory(self, game_state: GameState, usable_only: bool = True) -> list[dict[str, Any]]:
        """
        Describe held items for the presentation layer.

        Items without a definition are skipped; with usable_only, so are
        items that have no effects.
        """
        entries = []
        for held in game_state.inventory.items:
            definition = self.item_catalog.get_definition(held.id)
            if definition is None:
                logger.debug(f"Item {held.id} not found in catalog")
                continue
            if usable_only and not definition.effects.has_effects:
                continue

            entries.append(
                {
                    "id": definition.id,
                    "name": definition.name,
                    "description": definition.description,
                    "image": definition.image,
                    "quantity": held.quantity,
                    "consumeOnUse": definition.consume_on_use,
                    "effects": definition.effects.to_dict(),
                    "canUse": not self.usage_restrictions(definition),
                    "usageRestrictions": self.usage_restrictions(definition),
                }
            )
        return entries

    def usage_restrictions(self, definition: ItemDefinition) -> list[str]:
        restrictions = []
        if not definition.effects.has_effects:
            restrictions.append("Item has no usable effects")
        return restrictions

    def _reject(self, game_state: GameState, error: str, description: str) -> ItemUseResult:
        logger.warning(f"Item use rejected: {error}")
        applied = EffectsApplied()
        applied.errors.append(error)
        return ItemUseResult(success=False, game_state=game_state, effects_applied=applied, description=description)

    def use_item(self, item_id: str, game_state: GameState, quantity: int = 1) -> ItemUseResult:
        """
        Use `quantity` of an item.

        Rejected uses (unknown item, item not held, bad or excessive quantity,
        item with no effects) return success=False and the unchanged state.
        """
        definition = self.item_catalog.get_definition(item_id)
        if definition is None:
            return self._reject(game_state, f"Item {item_id} not found in database", "Unknown item")

        held = game_state.inventory.get_item(item_id)
        if held is None:
            return self._reject(game_state, f"Item {item_id} not found in inventory", "Item not in inventory")

        if quantity <= 0:
            return self._reject(game_state, f"Invalid quantity: {quantity}", "Invalid usage amount")

        if quantity > held.quantity:
            return self._reject(
                game_state,
                f"Insufficient quantity: have {held.quantity}, need {quantity}",
                "Not enough items",
            )

        restrictions = self.usage_restrictions(definition)
        if restrictions:
            return self._reject(game_state, ", ".join(restrictions), f"Cannot use item: {', '.join(restrictions)}")

        applied = EffectsApplied()
        effects = definition.effects
        state = game_state
        if effects.stat_changes:
            state = self.resolver.apply_stat_changes(state, effects.stat_changes, applied, multiplier=quantity)
        if effects.remove_status:
            state = self.resolver.remove_statuses(state, effects.remove_status, applied)
        if effects.apply_status:
            state = self.resolver.apply_statuses(state, effects.apply_status, applied)

        consumed = False
        if definition.consume_on_use:
            inventory, _removed = state.inventory.remove_item(item_id, quantity)
            state = state.with_inventory(inventory)
            consumed = True

        logger.debug(f"Used {quantity} x {item_id}")
        return ItemUseResult(
            success=True,
            game_state=state,
            effects_applied=applied,
            description=self._describe_use(definition, applied, quantity),
            item_consumed=consumed,
        )

    def _describe_use(self, definition: ItemDefinition, applied: EffectsApplied, quantity: int) -> str:
        parts = [f"Used {quantity} {definition.name}" if quantity > 1 else f"Used {definition.name}"]

        stat_parts = [
            f"{name} {change.actual:+d}"
            for name, change in applied.stat_changes.items()
            if change.actual != 0
        ]
        if stat_parts:
            parts.append(f"Effects: {', '.join(stat_parts)}")
        if applied.status_removed:
            parts.append(f"Removed: {', '.join(applied.status_removed)}")
        if applied.status_effects_applied:
            parts.append(f"Applied: {', '.join(applied.status_effects_applied)}")
        if applied.warnings:
            parts.append(f"Note: {', '.join(applied.warnings)}")

        return ". ".join(parts)
