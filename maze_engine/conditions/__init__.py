"""
Choice conditions: predicate types, requirement checks and success rolls.
"""

from maze_engine.conditions.predicates import (
    All,
    ComparisonOperator,
    ItemsPresent,
    Predicate,
    Probability,
    StatCompare,
    compare,
    parse_requirements,
    parse_success_conditions,
    predicate_to_dict,
)
from maze_engine.conditions.requirement_evaluator import (
    RequirementCheck,
    StatShortfall,
    evaluate_requirements,
)
from maze_engine.conditions.success_evaluator import SuccessEvaluator

__all__ = [
    "All",
    "ComparisonOperator",
    "ItemsPresent",
    "Predicate",
    "Probability",
    "StatCompare",
    "compare",
    "parse_requirements",
    "parse_success_conditions",
    "predicate_to_dict",
    "RequirementCheck",
    "StatShortfall",
    "evaluate_requirements",
    "SuccessEvaluator",
]
