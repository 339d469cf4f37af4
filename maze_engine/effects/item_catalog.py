"""
Item catalog.

Holds display names for items gained from events and the definitions of
usable items (their stat changes and status interactions). The catalog is
built from plain dicts; reading item files from disk is the loader's job.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional
import logging

from maze_engine.data_models import InventoryItem, Stat, to_int
from maze_engine.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


# Names for items that appear in events without a full definition
KNOWN_ITEM_NAMES: dict[str, str] = {
    "sword": "Iron Sword",
    "shield": "Wooden Shield",
    "potion": "Health Potion",
    "magic_ring": "Magic Ring",
    "special_key": "Special Key",
}


def default_item_name(item_id: str) -> str:
    return item_id.replace("_", " ").upper()


@dataclass(frozen=True)
class ItemEffects:
    """What happens when an item is used."""
    stat_changes: Mapping[Stat, int] = field(default_factory=dict)
    remove_status: tuple[str, ...] = ()
    apply_status: tuple[str, ...] = ()

    def __post_init__(self):
        changes = {
            Stat.resolve(name): to_int(delta, f"{name} change")
            for name, delta in (self.stat_changes or {}).items()
        }
        object.__setattr__(self, "stat_changes", changes)
        object.__setattr__(self, "remove_status", tuple(self.remove_status or ()))
        object.__setattr__(self, "apply_status", tuple(self.apply_status or ()))

    @property
    def has_effects(self) -> bool:
        return bool(self.stat_changes or self.remove_status or self.apply_status)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.stat_changes:
            data["statChanges"] = {stat.value: delta for stat, delta in self.stat_changes.items()}
        if self.remove_status:
            data["removeStatus"] = list(self.remove_status)
        if self.apply_status:
            data["applyStatus"] = list(self.apply_status)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ItemEffects":
        return cls(
            stat_changes=data.get("statChanges") or {},
            remove_status=tuple(data.get("removeStatus") or ()),
            apply_status=tuple(data.get("applyStatus") or ()),
        )


@dataclass(frozen=True)
class ItemDefinition:
    """A usable item."""
    id: str
    name: str
    description: str
    image: str = ""
    item_type: str = "ACTIVE"
    consume_on_use: bool = True
    effects: ItemEffects = field(default_factory=ItemEffects)

    def is_valid(self) -> bool:
        return bool(self.id and self.name and self.description and self.item_type)

    def to_inventory_item(self, quantity: int = 1) -> InventoryItem:
        return InventoryItem(id=self.id, name=self.name, quantity=quantity, description=self.description)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "itemType": self.item_type,
            "consumeOnUse": self.consume_on_use,
            "effects": self.effects.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ItemDefinition":
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            description=data.get("description") or "",
            image=data.get("image") or "",
            item_type=data.get("itemType") or "ACTIVE",
            consume_on_use=data.get("consumeOnUse", True),
            effects=ItemEffects.from_dict(data.get("effects") or {}),
        )


DEFAULT_ITEMS: list[dict[str, Any]] = [
    {
        "id": "health_potion",
        "name": "Health Potion",
        "description": "Restores health",
        "image": "health_potion.png",
        "effects": {"statChanges": {"HP": 25}},
    },
]


class ItemCatalog:
    """
    Catalog of item names and usable item definitions.

    Lookups never fail: ids without a definition or a known name get a name
    derived from the id.
    """

    def __init__(
        self,
        definitions: Optional[Mapping[str, ItemDefinition]] = None,
        names: Optional[Mapping[str, str]] = None,
    ):
        self._definitions: dict[str, ItemDefinition] = dict(definitions or {})
        self._names: dict[str, str] = dict(KNOWN_ITEM_NAMES if names is None else names)

    @classmethod
    def from_dicts(cls, items: list[Mapping[str, Any]]) -> "ItemCatalog":
        """
        Build a catalog from item dicts, skipping invalid entries.
        """
        catalog = cls()
        for data in items:
            try:
                definition = ItemDefinition.from_dict(data)
            except (InvalidArgumentError, TypeError) as e:
                logger.error(f"Failed to parse item {data.get('id', '?')}: {e} - skipping")
                continue
            if not definition.is_valid():
                logger.warning(f"Invalid item data for {definition.id or '?'} - skipping")
                continue
            catalog.register(definition)

        logger.info(f"Loaded {len(catalog)} item definitions")
        return catalog

    @classmethod
    def default(cls) -> "ItemCatalog":
        return cls.from_dicts(DEFAULT_ITEMS)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._definitions

    def register(self, definition: ItemDefinition) -> None:
        self._definitions[definition.id] = definition

    def get_definition(self, item_id: str) -> Optional[ItemDefinition]:
        return self._definitions.get(item_id)

    def get_display_name(self, item_id: str) -> str:
        definition = self._definitions.get(item_id)
        if definition is not None:
            return definition.name
        return self._names.get(item_id) or default_item_name(item_id)

    def create_item(self, item_id: str, quantity: int = 1) -> InventoryItem:
        """Build an InventoryItem for an id gained through an event."""
        definition = self._definitions.get(item_id)
        if definition is not None:
            return definition.to_inventory_item(quantity)
        return InventoryItem(
            id=item_id,
            name=self.get_display_name(item_id),
            quantity=quantity,
            description="Item gained from event",
        )
