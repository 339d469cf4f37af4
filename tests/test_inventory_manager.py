"""
Tests for item use and inventory display.
"""

import pytest

from maze_engine.data_models import GameState, Inventory, InventoryItem, PlayerStats, StatusEffect
from maze_engine.effects.inventory_manager import InventoryManager
from maze_engine.effects.item_catalog import ItemCatalog, ItemDefinition, ItemEffects


@pytest.fixture
def item_catalog():
    catalog = ItemCatalog.default()
    catalog.register(
        ItemDefinition(
            id="antidote",
            name="Antidote",
            description="Cures poison",
            effects=ItemEffects(stat_changes={"HP": 5}, remove_status=("poison",)),
        )
    )
    catalog.register(
        ItemDefinition(
            id="lucky_charm",
            name="Lucky Charm",
            description="Brings fortune",
            consume_on_use=False,
            effects=ItemEffects(apply_status=("blessing",)),
        )
    )
    catalog.register(ItemDefinition(id="pebble", name="Pebble", description="Just a pebble"))
    return catalog


@pytest.fixture
def manager(item_catalog):
    return InventoryManager(item_catalog=item_catalog)


def holding(*items, hp=50):
    return GameState(stats=PlayerStats(hp=hp), inventory=Inventory(items=tuple(items)))


class TestUseItem:
    """Tests for InventoryManager.use_item."""

    def test_potion_heals_and_is_consumed(self, manager):
        state = holding(InventoryItem(id="health_potion", name="Health Potion", quantity=2))

        result = manager.use_item("health_potion", state)

        assert result.success
        assert result.item_consumed
        assert result.game_state.stats.hp == 75
        assert result.game_state.inventory.quantity_of("health_potion") == 1
        assert result.description == "Used Health Potion. Effects: HP +25"

    def test_item_use_does_not_advance_turn(self, manager):
        state = holding(InventoryItem(id="health_potion", name="Health Potion"))
        assert manager.use_item("health_potion", state).game_state.turn_count == 0

    def test_quantity_scales_stat_changes(self, manager):
        state = holding(InventoryItem(id="health_potion", name="Health Potion", quantity=2), hp=40)

        result = manager.use_item("health_potion", state, quantity=2)

        assert result.game_state.stats.hp == 90
        assert not result.game_state.inventory.has_item("health_potion")
        assert result.description.startswith("Used 2 Health Potion")

    def test_overheal_clamped_with_note(self, manager):
        state = holding(InventoryItem(id="health_potion", name="Health Potion"), hp=90)

        result = manager.use_item("health_potion", state)

        assert result.game_state.stats.hp == 100
        assert result.effects_applied.stat_changes["HP"].actual == 10
        assert "HP clamped to maximum (100)" in result.description

    def test_insufficient_quantity(self, manager):
        state = holding(InventoryItem(id="health_potion", name="Health Potion"))

        result = manager.use_item("health_potion", state, quantity=2)

        assert not result.success
        assert result.errors == ["Insufficient quantity: have 1, need 2"]
        assert result.game_state is state

    def test_unknown_item(self, manager, initial_state):
        result = manager.use_item("mystery", initial_state)
        assert not result.success
        assert result.errors == ["Item mystery not found in database"]

    def test_item_not_held(self, manager, initial_state):
        result = manager.use_item("health_potion", initial_state)
        assert result.errors == ["Item health_potion not found in inventory"]

    def test_invalid_quantity(self, manager):
        state = holding(InventoryItem(id="health_potion", name="Health Potion"))
        result = manager.use_item("health_potion", state, quantity=0)
        assert result.errors == ["Invalid quantity: 0"]

    def test_item_without_effects(self, manager):
        state = holding(InventoryItem(id="pebble", name="Pebble"))
        result = manager.use_item("pebble", state)
        assert not result.success
        assert result.errors == ["Item has no usable effects"]

    def test_antidote_removes_status(self, manager):
        poisoned = holding(InventoryItem(id="antidote", name="Antidote")).with_status_effect(
            StatusEffect(id="poison", name="Poisoned", type="DEBUFF", remaining_duration=4)
        )

        result = manager.use_item("antidote", poisoned)

        assert not result.game_state.has_status("poison")
        assert result.effects_applied.status_removed == ["poison"]
        assert result.game_state.stats.hp == 55

    def test_non_consumable_kept(self, manager):
        state = holding(InventoryItem(id="lucky_charm", name="Lucky Charm"))

        result = manager.use_item("lucky_charm", state)

        assert result.success
        assert not result.item_consumed
        assert result.game_state.inventory.has_item("lucky_charm")
        assert result.game_state.has_status("blessing")


class TestDisplayInventory:
    """Tests for InventoryManager.display_inventory."""

    def test_usable_only(self, manager):
        state = holding(
            InventoryItem(id="health_potion", name="Health Potion", quantity=3),
            InventoryItem(id="pebble", name="Pebble"),
            InventoryItem(id="sword", name="Iron Sword"),
        )

        entries = manager.display_inventory(state)

        assert [e["id"] for e in entries] == ["health_potion"]
        assert entries[0]["quantity"] == 3
        assert entries[0]["canUse"]

    def test_include_unusable(self, manager):
        state = holding(InventoryItem(id="pebble", name="Pebble"))

        entries = manager.display_inventory(state, usable_only=False)

        assert entries[0]["canUse"] is False
        assert entries[0]["usageRestrictions"] == ["Item has no usable effects"]


class TestItemCatalog:
    """Tests for loading item definitions."""

    def test_invalid_entries_skipped(self):
        catalog = ItemCatalog.from_dicts(
            [
                {"id": "torch", "name": "Torch", "description": "Lights the way"},
                {"id": "", "name": "Nameless", "description": "?"},
                {"id": "bad", "name": "Bad", "description": "x", "effects": {"statChanges": {"MANA": 5}}},
                {"id": "odd", "name": "Odd", "description": "x", "effects": {"statChanges": {"HP": "lots"}}},
            ]
        )
        assert "torch" in catalog
        assert len(catalog) == 1

    def test_display_names(self):
        catalog = ItemCatalog.default()
        assert catalog.get_display_name("health_potion") == "Health Potion"
        assert catalog.get_display_name("magic_ring") == "Magic Ring"
        assert catalog.get_display_name("glass_eye") == "GLASS EYE"
