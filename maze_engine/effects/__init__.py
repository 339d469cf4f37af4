"""
Effect resolution, catalogs and item use.
"""

from maze_engine.effects.status_catalog import (
    StatusCatalog,
    StatusDefinition,
    DEFAULT_STATUS_TABLE,
)
from maze_engine.effects.item_catalog import (
    ItemCatalog,
    ItemDefinition,
    ItemEffects,
)
from maze_engine.effects.effect_resolver import (
    EffectResolver,
    EffectsApplied,
    StatChange,
)
from maze_engine.effects.inventory_manager import InventoryManager, ItemUseResult

__all__ = [
    "StatusCatalog",
    "StatusDefinition",
    "DEFAULT_STATUS_TABLE",
    "ItemCatalog",
    "ItemDefinition",
    "ItemEffects",
    "EffectResolver",
    "EffectsApplied",
    "StatChange",
    "InventoryManager",
    "ItemUseResult",
]
