"""
Success evaluation for choices.

A choice with no success conditions always succeeds. Otherwise every stat
comparison must hold and every probability draw must land below its p. All
leaves are evaluated, so the number of random draws depends only on the
shape of the predicate and never on the player's stats.
"""

from typing import Optional
import logging

from maze_engine.conditions.predicates import (
    All,
    ItemsPresent,
    Predicate,
    Probability,
    StatCompare,
)
from maze_engine.data_models import DiceRoller, GameState
from maze_engine.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class SuccessEvaluator:
    """Evaluates success conditions using an injected DiceRoller."""

    def __init__(self, dice: DiceRoller):
        self.dice = dice

    def evaluate(self, conditions: Optional[Predicate], game_state: GameState) -> bool:
        if conditions is None:
            return True
        return self._evaluate(conditions, game_state)

    def _evaluate(self, node: Predicate, game_state: GameState) -> bool:
        if isinstance(node, All):
            results = [self._evaluate(child, game_state) for child in node.predicates]
            return all(results)

        if isinstance(node, Probability):
            sample = self.dice.random(reason=f"success check p={node.p}")
            passed = sample < node.p
            logger.debug(f"Probability check: {sample:.4f} < {node.p} -> {passed}")
            return passed

        if isinstance(node, StatCompare):
            return node.operator.apply(game_state.stats.get(node.stat), node.value)

        if isinstance(node, ItemsPresent):
            return all(game_state.inventory.has_item(item_id) for item_id in node.item_ids)

        raise InvalidArgumentError(f"Unknown success predicate: {node!r}")
