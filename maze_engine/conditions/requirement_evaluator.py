"""
Requirement evaluation for choices.

Decides whether a choice may be taken at all, and explains why not when it
cannot. Pure: nothing here changes state or draws randomness.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
import logging

from maze_engine.conditions.predicates import (
    All,
    ItemsPresent,
    Predicate,
    Probability,
    StatCompare,
)
from maze_engine.data_models import GameState
from maze_engine.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatShortfall:
    """An unmet stat threshold."""
    stat_name: str
    operator: str
    required: int
    actual: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "statName": self.stat_name,
            "operator": self.operator,
            "requiredValue": self.required,
            "currentValue": self.actual,
        }


@dataclass(frozen=True)
class RequirementCheck:
    """Outcome of checking a choice's requirements."""
    is_available: bool = True
    missing_items: tuple[str, ...] = ()
    insufficient_stats: tuple[StatShortfall, ...] = ()
    failure_reasons: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "isAvailable": self.is_available,
            "missingItems": list(self.missing_items),
            "insufficientStats": [s.to_dict() for s in self.insufficient_stats],
            "failureReasons": list(self.failure_reasons),
        }


AVAILABLE = RequirementCheck()


def evaluate_requirements(requirements: Optional[Predicate], game_state: GameState) -> RequirementCheck:
    """
    Check a requirements predicate against the current game state.

    Every leaf is checked so the report lists all failures, not just the first.

    Raises:
        InvalidArgumentError: If the predicate contains a Probability or an
            unknown node type.
    """
    if requirements is None:
        return AVAILABLE

    missing: list[str] = []
    shortfalls: list[StatShortfall] = []
    reasons: list[str] = []

    def visit(node: Predicate) -> None:
        if isinstance(node, All):
            for child in node.predicates:
                visit(child)
        elif isinstance(node, ItemsPresent):
            for item_id in node.item_ids:
                if not game_state.inventory.has_item(item_id):
                    missing.append(item_id)
                    reasons.append(f"Missing required item: {item_id}")
        elif isinstance(node, StatCompare):
            actual = game_state.stats.get(node.stat)
            if not node.operator.apply(actual, node.value):
                shortfalls.append(
                    StatShortfall(
                        stat_name=node.stat.value,
                        operator=node.operator.value,
                        required=node.value,
                        actual=actual,
                    )
                )
                reasons.append(
                    f"Insufficient {node.stat.value}: {actual} {node.operator.value} {node.value} required"
                )
        elif isinstance(node, Probability):
            raise InvalidArgumentError("Requirements cannot contain a probability")
        else:
            raise InvalidArgumentError(f"Unknown requirement predicate: {node!r}")

    visit(requirements)

    if reasons:
        logger.debug(f"Requirements not met: {reasons}")

    return RequirementCheck(
        is_available=not reasons,
        missing_items=tuple(missing),
        insufficient_stats=tuple(shortfalls),
        failure_reasons=tuple(reasons),
    )
