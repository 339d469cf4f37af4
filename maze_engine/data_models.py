"""
Shared data structures for the maze event engine.

Every entity here is an immutable value: "mutating" operations return a new
instance and never touch one a caller may still hold. Field shapes for the
save layer and the event catalog are produced by to_dict()/from_dict().
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence
import json
import random

from maze_engine.errors import InvalidArgumentError

if TYPE_CHECKING:
    from maze_engine.conditions.predicates import Predicate
    from maze_engine.observability.run_log import RunLog


STAT_MIN = 0
STAT_MAX = 100


def clamp_stat(value: int) -> int:
    """Clamp a stat value into [STAT_MIN, STAT_MAX]."""
    return max(STAT_MIN, min(STAT_MAX, value))


def to_int(value: Any, label: str) -> int:
    """Convert an authored or saved number, raising InvalidArgumentError on junk."""
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{label} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"{label} must be an integer, got {value!r}") from e


# =============================================================================
# ENUMS
# =============================================================================


class Stat(str, Enum):
    """The four bounded player stats."""

    HP = "HP"
    SAN = "SAN"
    FIT = "FIT"
    HUNGER = "HUNGER"

    @classmethod
    def resolve(cls, name: "str | Stat") -> "Stat":
        """
        Resolve a stat name or alias to a Stat.

        Accepts any case plus the FITNESS and SANITY aliases. Unknown names
        raise InvalidArgumentError.
        """
        if isinstance(name, Stat):
            return name
        key = str(name).strip().upper()
        stat = _STAT_ALIASES.get(key)
        if stat is None:
            raise InvalidArgumentError(f"Unknown stat name: {name}")
        return stat

    @property
    def save_key(self) -> str:
        """Lower-case key used in the save shape."""
        return self.value.lower()


_STAT_ALIASES: dict[str, Stat] = {
    "HP": Stat.HP,
    "SAN": Stat.SAN,
    "SANITY": Stat.SAN,
    "FIT": Stat.FIT,
    "FITNESS": Stat.FIT,
    "HUNGER": Stat.HUNGER,
}


class StatusType(str, Enum):
    """Whether a status effect helps or hinders the player."""

    BUFF = "BUFF"
    DEBUFF = "DEBUFF"

    @classmethod
    def parse(cls, value: "str | StatusType") -> "StatusType":
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown status type: {value!r}") from e


class Persistence(str, Enum):
    """Whether an event is consumed after resolution or may recur."""

    ONE_TIME = "oneTime"
    PERSISTENT = "persistent"


# =============================================================================
# DICE
# =============================================================================


@dataclass
class DiceResult:
    """Result of a dice roll with full information."""
    notation: str
    rolls: list[int]
    modifier: int
    total: int
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        if self.modifier > 0:
            return f"{self.notation}: {self.rolls} + {self.modifier} = {self.total}"
        elif self.modifier < 0:
            return f"{self.notation}: {self.rolls} - {abs(self.modifier)} = {self.total}"
        return f"{self.notation}: {self.rolls} = {self.total}"


class DiceRoller:
    """
    Injectable randomization source.

    All randomness consumed by the engine goes through an instance of this
    class, so seeding one roller makes a whole session reproducible. Each
    roller owns its own random.Random; nothing touches the module-level
    generator.
    """

    def __init__(self, seed: Optional[int] = None, run_log: Optional["RunLog"] = None):
        self._seed = seed
        self._rng = random.Random(seed)
        self._roll_log: list[DiceResult] = []
        self._run_log = run_log

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def set_seed(self, seed: int) -> None:
        """Reseed the generator for reproducibility."""
        self._seed = seed
        self._rng.seed(seed)
        if self._run_log is not None:
            self._run_log.set_seed(seed)

    def attach_run_log(self, run_log: Optional["RunLog"]) -> None:
        self._run_log = run_log

    def _record(self, result: DiceResult) -> DiceResult:
        self._roll_log.append(result)
        if self._run_log is not None:
            self._run_log.log_roll(
                notation=result.notation,
                rolls=result.rolls,
                modifier=result.modifier,
                total=result.total,
                reason=result.reason,
            )
        return result

    def roll(self, dice: str, reason: str = "") -> DiceResult:
        """
        Roll dice using standard notation (e.g., '2d6', '1d20+5', '3d6-2').

        Args:
            dice: Dice notation string
            reason: Why this roll is being made (for logging)

        Returns:
            DiceResult with individual rolls and total
        """
        notation = dice.replace(" ", "").lower()
        modifier = 0
        try:
            if "+" in notation:
                dice_part, mod_part = notation.split("+")
                modifier = int(mod_part)
            elif "-" in notation:
                dice_part, mod_part = notation.split("-")
                modifier = -int(mod_part)
            else:
                dice_part = notation

            num_dice, die_size = dice_part.split("d")
            num_dice = int(num_dice) if num_dice else 1
            die_size = int(die_size)
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid dice notation: {dice}") from e

        if num_dice < 1 or die_size < 1:
            raise InvalidArgumentError(f"Invalid dice notation: {dice}")

        rolls = [self._rng.randint(1, die_size) for _ in range(num_dice)]
        return self._record(
            DiceResult(
                notation=dice,
                rolls=rolls,
                modifier=modifier,
                total=sum(rolls) + modifier,
                reason=reason,
            )
        )

    def roll_d6(self, num_dice: int = 1, reason: str = "") -> DiceResult:
        """Convenience method for d6 rolls."""
        return self.roll(f"{num_dice}d6", reason)

    def random(self, reason: str = "") -> float:
        """Draw one uniform sample in [0.0, 1.0)."""
        value = self._rng.random()
        self._record(
            DiceResult(notation="uniform", rolls=[], modifier=0, total=0, reason=f"{reason} ({value:.4f})")
        )
        return value

    def randint(self, a: int, b: int, reason: str = "") -> int:
        """Return a random integer in [a, b], inclusive."""
        value = self._rng.randint(a, b)
        self._record(
            DiceResult(notation=f"range({a}-{b})", rolls=[value], modifier=0, total=value, reason=reason)
        )
        return value

    def randrange(self, n: int, reason: str = "") -> int:
        """Return a random index in [0, n)."""
        if n <= 0:
            raise InvalidArgumentError(f"Cannot draw an index from an empty range: {n}")
        return self.randint(0, n - 1, reason)

    def choice(self, seq: Sequence[Any], reason: str = "") -> Any:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randrange(len(seq), reason)]

    def get_roll_log(self) -> list[DiceResult]:
        """Get the complete roll log for this roller."""
        return self._roll_log.copy()

    def clear_roll_log(self) -> None:
        self._roll_log = []


# =============================================================================
# PLAYER STATE
# =============================================================================


@dataclass(frozen=True)
class PlayerStats:
    """
    The player's four bounded stats.

    Values are clamped to [0, 100] at construction and on every change.
    """
    hp: int = 100
    san: int = 100
    fit: int = 70
    hunger: int = 80

    def __post_init__(self):
        for name in ("hp", "san", "fit", "hunger"):
            object.__setattr__(self, name, clamp_stat(to_int(getattr(self, name), f"Stat {name}")))

    @classmethod
    def initial(cls) -> "PlayerStats":
        return cls()

    def get(self, stat: "str | Stat") -> int:
        return getattr(self, Stat.resolve(stat).save_key)

    def with_value(self, stat: "str | Stat", value: int) -> "PlayerStats":
        return replace(self, **{Stat.resolve(stat).save_key: clamp_stat(value)})

    def with_changes(self, changes: Mapping["str | Stat", int]) -> "PlayerStats":
        stats = self
        for stat, delta in changes.items():
            stats = stats.with_value(stat, stats.get(stat) + delta)
        return stats

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def is_sane(self) -> bool:
        return self.san > 0

    @property
    def is_starving(self) -> bool:
        return self.hunger <= 0

    def to_dict(self) -> dict[str, int]:
        return {"hp": self.hp, "san": self.san, "fit": self.fit, "hunger": self.hunger}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlayerStats":
        return cls(
            hp=data.get("hp", 100),
            san=data.get("san", 100),
            fit=data.get("fit", 70),
            hunger=data.get("hunger", 80),
        )


@dataclass(frozen=True)
class StatusEffect:
    """A timed buff or debuff. At most one per id is active at a time."""
    id: str
    name: str
    type: StatusType
    remaining_duration: int
    icon: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "type", StatusType.parse(self.type))
        if self.remaining_duration < 0:
            raise InvalidArgumentError(
                f"Status effect {self.id} has negative duration: {self.remaining_duration}"
            )

    @property
    def is_buff(self) -> bool:
        return self.type == StatusType.BUFF

    @property
    def is_debuff(self) -> bool:
        return self.type == StatusType.DEBUFF

    @property
    def is_expired(self) -> bool:
        return self.remaining_duration <= 0

    def decremented(self) -> "StatusEffect":
        """Return a copy with one less turn remaining (never below zero)."""
        return replace(self, remaining_duration=max(0, self.remaining_duration - 1))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "remainingDuration": self.remaining_duration,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StatusEffect":
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            type=data.get("type") or StatusType.DEBUFF.value,
            remaining_duration=max(0, to_int(data.get("remainingDuration", 1), "Status duration")),
            icon=data.get("icon"),
        )


@dataclass(frozen=True)
class InventoryItem:
    """A stack of one item id held by the player."""
    id: str
    name: str
    quantity: int = 1
    description: Optional[str] = None
    icon: Optional[str] = None

    def __post_init__(self):
        if self.quantity < 1:
            raise InvalidArgumentError(f"Item {self.id} must have quantity >= 1, got {self.quantity}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "description": self.description,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InventoryItem":
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            quantity=to_int(data.get("quantity", 1), "Item quantity"),
            description=data.get("description"),
            icon=data.get("icon"),
        )


DEFAULT_MAX_SLOTS = 5


@dataclass(frozen=True)
class Inventory:
    """
    Ordered, slot-limited inventory.

    Each id occupies one slot and stacks its quantity. Adding a new id to a
    full inventory fails; adding a held id always stacks.
    """
    items: tuple[InventoryItem, ...] = ()
    max_slots: int = DEFAULT_MAX_SLOTS

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        if len(self.items) > self.max_slots:
            raise InvalidArgumentError(
                f"Inventory holds {len(self.items)} items but only has {self.max_slots} slots"
            )
        ids = [item.id for item in self.items]
        if len(ids) != len(set(ids)):
            raise InvalidArgumentError(f"Inventory contains duplicate item ids: {ids}")

    @property
    def is_full(self) -> bool:
        return len(self.items) >= self.max_slots

    @property
    def available_slots(self) -> int:
        return self.max_slots - len(self.items)

    def _index_of(self, item_id: str) -> int:
        for index, item in enumerate(self.items):
            if item.id == item_id:
                return index
        return -1

    def has_item(self, item_id: str) -> bool:
        return self._index_of(item_id) != -1

    def get_item(self, item_id: str) -> Optional[InventoryItem]:
        index = self._index_of(item_id)
        return self.items[index] if index != -1 else None

    def quantity_of(self, item_id: str) -> int:
        item = self.get_item(item_id)
        return item.quantity if item else 0

    def add_item(self, item: InventoryItem) -> tuple["Inventory", bool]:
        """
        Add an item, stacking onto an existing id.

        Returns:
            Tuple of (new inventory, whether the item was added)
        """
        index = self._index_of(item.id)
        if index != -1:
            existing = self.items[index]
            stacked = replace(existing, quantity=existing.quantity + item.quantity)
            items = self.items[:index] + (stacked,) + self.items[index + 1:]
            return replace(self, items=items), True

        if self.is_full:
            return self, False

        return replace(self, items=self.items + (item,)), True

    def remove_item(self, item_id: str, quantity: int = 1) -> tuple["Inventory", int]:
        """
        Remove up to `quantity` of an item.

        Takes whatever is held when the stack is smaller than requested.

        Returns:
            Tuple of (new inventory, quantity actually removed)
        """
        if quantity < 1:
            raise InvalidArgumentError(f"Invalid removal quantity: {quantity}")

        index = self._index_of(item_id)
        if index == -1:
            return self, 0

        item = self.items[index]
        if item.quantity <= quantity:
            items = self.items[:index] + self.items[index + 1:]
            return replace(self, items=items), item.quantity

        reduced = replace(item, quantity=item.quantity - quantity)
        items = self.items[:index] + (reduced,) + self.items[index + 1:]
        return replace(self, items=items), quantity

    def item_ids(self) -> list[str]:
        return [item.id for item in self.items]

    def to_list(self) -> list[dict[str, Any]]:
        return [item.to_dict() for item in self.items]

    @classmethod
    def from_list(cls, data: Sequence[Mapping[str, Any]], max_slots: int = DEFAULT_MAX_SLOTS) -> "Inventory":
        return cls(items=tuple(InventoryItem.from_dict(entry) for entry in data), max_slots=max_slots)


@dataclass(frozen=True)
class GameState:
    """
    Aggregate player state for one game session.

    start_time is bookkeeping for the save layer and is never read by the
    rules. current_event_id/current_event exist only for UI hand-off; the
    event snapshot is read-only and is left out of equality and hashing.
    """
    stats: PlayerStats = field(default_factory=PlayerStats.initial)
    status_effects: tuple[StatusEffect, ...] = ()
    inventory: Inventory = field(default_factory=Inventory)
    turn_count: int = 0
    start_time: datetime = field(default_factory=datetime.now)
    current_event_id: Optional[str] = None
    current_event: Optional[Mapping[str, Any]] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "status_effects", tuple(self.status_effects))
        if self.current_event is not None and not isinstance(self.current_event, MappingProxyType):
            object.__setattr__(self, "current_event", MappingProxyType(dict(self.current_event)))

    # -------------------------------------------------------------------------
    # Functional updates
    # -------------------------------------------------------------------------

    def with_stats(self, stats: PlayerStats) -> "GameState":
        return replace(self, stats=stats)

    def with_inventory(self, inventory: Inventory) -> "GameState":
        return replace(self, inventory=inventory)

    def with_stat_changes(self, changes: Mapping["str | Stat", int]) -> "GameState":
        """Apply clamped stat deltas and advance the turn counter."""
        return replace(self, stats=self.stats.with_changes(changes), turn_count=self.turn_count + 1)

    def with_status_effect(self, effect: StatusEffect) -> "GameState":
        """Add a status effect, replacing any active one with the same id."""
        remaining = tuple(e for e in self.status_effects if e.id != effect.id)
        return replace(self, status_effects=remaining + (effect,))

    def without_status_effect(self, effect_id: str) -> "GameState":
        return replace(
            self,
            status_effects=tuple(e for e in self.status_effects if e.id != effect_id),
        )

    def with_current_event(self, event: Optional["Event"]) -> "GameState":
        if event is None:
            return replace(self, current_event_id=None, current_event=None)
        return replace(self, current_event_id=event.id, current_event=event.to_dict())

    def process_turn(self) -> "GameState":
        """Decrement status durations, drop expired ones, advance the turn."""
        ticked = tuple(e.decremented() for e in self.status_effects)
        return replace(
            self,
            status_effects=tuple(e for e in ticked if not e.is_expired),
            turn_count=self.turn_count + 1,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def has_status(self, effect_id: str) -> bool:
        return any(e.id == effect_id for e in self.status_effects)

    def get_status(self, effect_id: str) -> Optional[StatusEffect]:
        for effect in self.status_effects:
            if effect.id == effect_id:
                return effect
        return None

    @property
    def active_buffs(self) -> list[StatusEffect]:
        return [e for e in self.status_effects if e.is_buff]

    @property
    def active_debuffs(self) -> list[StatusEffect]:
        return [e for e in self.status_effects if e.is_debuff]

    @property
    def is_game_over(self) -> bool:
        return not self.stats.is_alive or not self.stats.is_sane

    @property
    def game_over_reason(self) -> Optional[str]:
        if not self.stats.is_alive:
            return "death"
        if not self.stats.is_sane:
            return "insanity"
        return None

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the save-layer shape."""
        return {
            "stats": self.stats.to_dict(),
            "statusEffects": [e.to_dict() for e in self.status_effects],
            "inventory": self.inventory.to_list(),
            "currentEventId": self.current_event_id,
            "currentEvent": dict(self.current_event) if self.current_event is not None else None,
            "turnCount": self.turn_count,
            "startTime": self.start_time.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], max_slots: int = DEFAULT_MAX_SLOTS) -> "GameState":
        start_time = datetime.now()
        if data.get("startTime"):
            try:
                start_time = datetime.fromisoformat(data["startTime"])
            except ValueError:
                pass

        return cls(
            stats=PlayerStats.from_dict(data.get("stats") or {}),
            status_effects=tuple(StatusEffect.from_dict(e) for e in data.get("statusEffects") or []),
            inventory=Inventory.from_list(data.get("inventory") or [], max_slots=max_slots),
            turn_count=to_int(data.get("turnCount", 0), "Turn count"),
            start_time=start_time,
            current_event_id=data.get("currentEventId"),
            current_event=data.get("currentEvent"),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, source: str) -> "GameState":
        return cls.from_dict(json.loads(source))


# =============================================================================
# EVENTS
# =============================================================================


def _as_tuple(values: Optional[Sequence[str]]) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        raise InvalidArgumentError(f"Expected a list of ids, got string: {values!r}")
    return tuple(str(v) for v in values)


@dataclass(frozen=True)
class ChoiceEffects:
    """
    Declarative payload of changes a choice produces.

    Stat keys are resolved to Stat members at construction, so aliases such
    as FITNESS never reach the resolver.
    """
    description: str
    stat_changes: Mapping[Stat, int] = field(default_factory=dict)
    items_gained: tuple[str, ...] = ()
    items_lost: tuple[str, ...] = ()
    apply_status: tuple[str, ...] = ()

    def __post_init__(self):
        resolved: dict[Stat, int] = {}
        for name, delta in (self.stat_changes or {}).items():
            stat = Stat.resolve(name)
            resolved[stat] = resolved.get(stat, 0) + to_int(delta, f"{stat.value} change")
        object.__setattr__(self, "stat_changes", resolved)
        object.__setattr__(self, "items_gained", _as_tuple(self.items_gained))
        object.__setattr__(self, "items_lost", _as_tuple(self.items_lost))
        object.__setattr__(self, "apply_status", _as_tuple(self.apply_status))

    def __hash__(self) -> int:
        return hash((
            self.description,
            tuple(sorted((s.value, d) for s, d in self.stat_changes.items())),
            self.items_gained,
            self.items_lost,
            self.apply_status,
        ))

    def is_valid(self) -> bool:
        return bool(self.description)

    @property
    def has_effects(self) -> bool:
        return bool(self.stat_changes or self.items_gained or self.items_lost or self.apply_status)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"description": self.description}
        if self.stat_changes:
            data["statChanges"] = {stat.value: delta for stat, delta in self.stat_changes.items()}
        if self.items_gained:
            data["itemsGained"] = list(self.items_gained)
        if self.items_lost:
            data["itemsLost"] = list(self.items_lost)
        if self.apply_status:
            data["applyStatus"] = list(self.apply_status)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChoiceEffects":
        if "description" not in data:
            raise InvalidArgumentError("ChoiceEffects missing required field: description")
        return cls(
            description=data.get("description") or "",
            stat_changes=data.get("statChanges") or {},
            items_gained=data.get("itemsGained"),
            items_lost=data.get("itemsLost"),
            apply_status=data.get("applyStatus"),
        )


@dataclass(frozen=True)
class Choice:
    """A selectable action within an event."""
    text: str
    success_effects: ChoiceEffects
    requirements: Optional["Predicate"] = None
    success_conditions: Optional["Predicate"] = None
    failure_effects: Optional[ChoiceEffects] = None

    def is_valid(self) -> bool:
        return bool(self.text) and self.success_effects.is_valid()

    def to_dict(self) -> dict[str, Any]:
        from maze_engine.conditions.predicates import predicate_to_dict

        data: dict[str, Any] = {"text": self.text}
        if self.requirements is not None:
            data["requirements"] = predicate_to_dict(self.requirements)
        if self.success_conditions is not None:
            data["successConditions"] = predicate_to_dict(self.success_conditions)
        data["successEffects"] = self.success_effects.to_dict()
        if self.failure_effects is not None:
            data["failureEffects"] = self.failure_effects.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Choice":
        from maze_engine.conditions.predicates import (
            parse_requirements,
            parse_success_conditions,
        )

        if "text" not in data or "successEffects" not in data:
            raise InvalidArgumentError("Choice missing required fields: text or successEffects")

        failure = data.get("failureEffects")
        return cls(
            text=data.get("text") or "",
            requirements=parse_requirements(data.get("requirements")),
            success_conditions=parse_success_conditions(data.get("successConditions")),
            success_effects=ChoiceEffects.from_dict(data["successEffects"] or {}),
            failure_effects=ChoiceEffects.from_dict(failure) if failure is not None else None,
        )


@dataclass(frozen=True)
class Event:
    """
    A narrative encounter with one or more choices.

    Created once from the authored catalog and never mutated.
    """
    id: str
    name: str
    description: str
    image: str
    category: str
    weight: int
    persistence: Persistence
    choices: tuple[Choice, ...]

    def __post_init__(self):
        object.__setattr__(self, "choices", tuple(self.choices))
        if not isinstance(self.persistence, Persistence):
            try:
                object.__setattr__(self, "persistence", Persistence(self.persistence))
            except ValueError:
                # Kept as-is so is_valid() can report it
                pass

    @property
    def is_one_time(self) -> bool:
        return self.persistence == Persistence.ONE_TIME

    @property
    def is_trap(self) -> bool:
        return self.category == "trap"

    def is_valid(self) -> bool:
        if not all((self.id, self.name, self.description, self.image, self.category)):
            return False
        if self.weight <= 0:
            return False
        if not isinstance(self.persistence, Persistence):
            return False
        if not self.choices:
            return False
        return all(choice.is_valid() for choice in self.choices)

    def to_dict(self) -> dict[str, Any]:
        persistence = self.persistence.value if isinstance(self.persistence, Persistence) else self.persistence
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "category": self.category,
            "weight": self.weight,
            "persistence": persistence,
            "choices": [choice.to_dict() for choice in self.choices],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Event":
        for required in ("id", "name", "description", "choices"):
            if required not in data:
                raise InvalidArgumentError(f"Event missing required field: {required}")

        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            description=data.get("description") or "",
            image=data.get("image") or "",
            category=data.get("category") or "",
            weight=to_int(data.get("weight", 10), "Event weight"),
            persistence=data.get("persistence") or Persistence.ONE_TIME.value,
            choices=tuple(Choice.from_dict(c) for c in data.get("choices") or []),
        )
