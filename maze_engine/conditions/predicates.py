"""
Choice predicates.

Requirements and success conditions are authored as loose JSON maps:

    {"items": ["torch"],
     "stats": {"FITNESS": {"operator": ">=", "value": 40}},
     "probability": 0.6}

They are parsed once, when a Choice is built, into a small closed set of
predicate types. Evaluation (see requirement_evaluator and success_evaluator)
dispatches on those types and never looks at raw strings again.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union
import logging

from maze_engine.data_models import Stat
from maze_engine.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class ComparisonOperator(str, Enum):
    """Operators allowed in stat comparisons."""

    GT = ">"
    GE = ">="
    EQ = "=="
    LT = "<"
    LE = "<="

    @classmethod
    def parse(cls, symbol: "str | ComparisonOperator") -> "ComparisonOperator":
        if isinstance(symbol, ComparisonOperator):
            return symbol
        try:
            return cls(symbol)
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown operator: {symbol}") from e

    def apply(self, actual: int, required: int) -> bool:
        if self is ComparisonOperator.GT:
            return actual > required
        if self is ComparisonOperator.GE:
            return actual >= required
        if self is ComparisonOperator.EQ:
            return actual == required
        if self is ComparisonOperator.LT:
            return actual < required
        return actual <= required


def compare(actual: int, operator: "str | ComparisonOperator", required: int) -> bool:
    """
    Compare a stat value against a threshold.

    Raw operator strings are accepted; anything outside the supported set
    raises InvalidArgumentError rather than evaluating to True or False.
    """
    return ComparisonOperator.parse(operator).apply(actual, required)


# =============================================================================
# PREDICATE TYPES
# =============================================================================


@dataclass(frozen=True)
class ItemsPresent:
    """Every listed item id must be in the inventory."""
    item_ids: tuple[str, ...]


@dataclass(frozen=True)
class StatCompare:
    """A single stat threshold."""
    stat: Stat
    operator: ComparisonOperator
    value: int


@dataclass(frozen=True)
class Probability:
    """Succeeds when one uniform draw falls below p."""
    p: float

    def __post_init__(self):
        if not 0.0 <= self.p <= 1.0:
            raise InvalidArgumentError(f"Probability must be within [0, 1], got {self.p}")


@dataclass(frozen=True)
class All:
    """Conjunction of child predicates."""
    predicates: tuple["Predicate", ...]


Predicate = Union[ItemsPresent, StatCompare, Probability, All]


def iter_leaves(predicate: Optional[Predicate]):
    """Yield the non-All predicates in authoring order."""
    if predicate is None:
        return
    if isinstance(predicate, All):
        for child in predicate.predicates:
            yield from iter_leaves(child)
    else:
        yield predicate


# =============================================================================
# PARSING
# =============================================================================


def _parse_stats(raw: Any) -> list[StatCompare]:
    if raw is None:
        return []
    if not isinstance(raw, Mapping):
        raise InvalidArgumentError(f"Stat conditions must be a mapping, got {type(raw).__name__}")

    comparisons = []
    for name, condition in raw.items():
        if not isinstance(condition, Mapping) or "operator" not in condition or "value" not in condition:
            raise InvalidArgumentError(f"Malformed stat condition for {name}: {condition!r}")
        value = condition["value"]
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidArgumentError(f"Stat condition value for {name} must be an integer: {value!r}")
        comparisons.append(
            StatCompare(
                stat=Stat.resolve(name),
                operator=ComparisonOperator.parse(condition["operator"]),
                value=value,
            )
        )
    return comparisons


def _parse_items(raw: Any) -> Optional[ItemsPresent]:
    if raw is None:
        return None
    if isinstance(raw, str) or not isinstance(raw, (list, tuple)):
        raise InvalidArgumentError(f"Item requirements must be a list of ids, got {raw!r}")
    if not raw:
        return None
    return ItemsPresent(item_ids=tuple(str(item_id) for item_id in raw))


def _combine(parts: list[Predicate]) -> Optional[Predicate]:
    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]
    return All(predicates=tuple(parts))


def parse_requirements(raw: Optional[Mapping[str, Any]]) -> Optional[Predicate]:
    """
    Parse an authored requirements map.

    Supports "items" and "stats". A "probability" key is a malformed
    requirement, since availability must not depend on chance.
    """
    if not raw:
        return None
    if not isinstance(raw, Mapping):
        raise InvalidArgumentError(f"Requirements must be a mapping, got {type(raw).__name__}")
    if "probability" in raw:
        raise InvalidArgumentError("Requirements cannot contain a probability")

    unknown = set(raw) - {"items", "stats"}
    if unknown:
        raise InvalidArgumentError(f"Unknown requirement keys: {sorted(unknown)}")

    parts: list[Predicate] = []
    items = _parse_items(raw.get("items"))
    if items is not None:
        parts.append(items)
    parts.extend(_parse_stats(raw.get("stats")))
    return _combine(parts)


def parse_success_conditions(raw: Optional[Mapping[str, Any]]) -> Optional[Predicate]:
    """Parse an authored successConditions map ("probability" and/or "stats")."""
    if not raw:
        return None
    if not isinstance(raw, Mapping):
        raise InvalidArgumentError(f"Success conditions must be a mapping, got {type(raw).__name__}")

    unknown = set(raw) - {"probability", "stats"}
    if unknown:
        raise InvalidArgumentError(f"Unknown success condition keys: {sorted(unknown)}")

    parts: list[Predicate] = []
    if "probability" in raw:
        p = raw["probability"]
        if isinstance(p, bool) or not isinstance(p, (int, float)):
            raise InvalidArgumentError(f"Probability must be a number, got {p!r}")
        parts.append(Probability(p=float(p)))
    parts.extend(_parse_stats(raw.get("stats")))
    return _combine(parts)


def predicate_to_dict(predicate: Predicate) -> dict[str, Any]:
    """Render a predicate back into the authored map shape."""
    data: dict[str, Any] = {}
    for leaf in iter_leaves(predicate):
        if isinstance(leaf, ItemsPresent):
            data.setdefault("items", []).extend(leaf.item_ids)
        elif isinstance(leaf, StatCompare):
            data.setdefault("stats", {})[leaf.stat.value] = {
                "operator": leaf.operator.value,
                "value": leaf.value,
            }
        elif isinstance(leaf, Probability):
            data["probability"] = leaf.p
    return data
