"""
Tests for predicate parsing and stat comparison.
"""

import pytest

from maze_engine.conditions.predicates import (
    All,
    ComparisonOperator,
    ItemsPresent,
    Probability,
    StatCompare,
    compare,
    iter_leaves,
    parse_requirements,
    parse_success_conditions,
    predicate_to_dict,
)
from maze_engine.data_models import Stat
from maze_engine.errors import InvalidArgumentError


class TestCompare:
    """Every operator at, above and below its threshold."""

    @pytest.mark.parametrize(
        "operator,actual,expected",
        [
            (">", 49, False),
            (">", 50, False),
            (">", 51, True),
            (">=", 49, False),
            (">=", 50, True),
            (">=", 51, True),
            ("==", 49, False),
            ("==", 50, True),
            ("==", 51, False),
            ("<", 49, True),
            ("<", 50, False),
            ("<", 51, False),
            ("<=", 49, True),
            ("<=", 50, True),
            ("<=", 51, False),
        ],
    )
    def test_operator_boundaries(self, operator, actual, expected):
        assert compare(actual, operator, 50) is expected

    @pytest.mark.parametrize("operator", ["!=", "=>", "", "gt"])
    def test_unknown_operator_raises(self, operator):
        with pytest.raises(InvalidArgumentError, match="Unknown operator"):
            compare(50, operator, 50)

    def test_enum_operator_accepted(self):
        assert compare(10, ComparisonOperator.LE, 10)


class TestParseRequirements:
    """Tests for parsing authored requirement maps."""

    def test_empty_is_none(self):
        assert parse_requirements(None) is None
        assert parse_requirements({}) is None

    def test_items_only(self):
        assert parse_requirements({"items": ["torch"]}) == ItemsPresent(item_ids=("torch",))

    def test_items_and_stats(self):
        predicate = parse_requirements(
            {"items": ["torch"], "stats": {"FITNESS": {"operator": ">=", "value": 40}}}
        )
        assert predicate == All(
            predicates=(
                ItemsPresent(item_ids=("torch",)),
                StatCompare(stat=Stat.FIT, operator=ComparisonOperator.GE, value=40),
            )
        )

    def test_probability_rejected(self):
        with pytest.raises(InvalidArgumentError, match="probability"):
            parse_requirements({"probability": 0.5})

    def test_unknown_key_rejected(self):
        with pytest.raises(InvalidArgumentError):
            parse_requirements({"gold": 10})

    def test_non_integer_value_rejected(self):
        with pytest.raises(InvalidArgumentError):
            parse_requirements({"stats": {"HP": {"operator": ">=", "value": "40"}}})

    def test_malformed_stat_condition_rejected(self):
        with pytest.raises(InvalidArgumentError):
            parse_requirements({"stats": {"HP": 40}})

    def test_unknown_stat_rejected(self):
        with pytest.raises(InvalidArgumentError):
            parse_requirements({"stats": {"MANA": {"operator": ">=", "value": 1}}})

    def test_unknown_operator_rejected_at_parse(self):
        with pytest.raises(InvalidArgumentError, match="Unknown operator"):
            parse_requirements({"stats": {"HP": {"operator": "~", "value": 1}}})


class TestParseSuccessConditions:
    """Tests for parsing authored success condition maps."""

    def test_probability(self):
        assert parse_success_conditions({"probability": 0.25}) == Probability(p=0.25)

    def test_probability_out_of_range(self):
        with pytest.raises(InvalidArgumentError):
            parse_success_conditions({"probability": 1.5})

    def test_probability_and_stats(self):
        predicate = parse_success_conditions(
            {"probability": 0.5, "stats": {"SAN": {"operator": ">", "value": 20}}}
        )
        leaves = list(iter_leaves(predicate))
        assert leaves == [
            Probability(p=0.5),
            StatCompare(stat=Stat.SAN, operator=ComparisonOperator.GT, value=20),
        ]

    def test_items_not_a_success_condition(self):
        with pytest.raises(InvalidArgumentError):
            parse_success_conditions({"items": ["torch"]})

    def test_render_back_to_authored_shape(self):
        raw = {"probability": 0.5, "stats": {"HP": {"operator": "<", "value": 30}}}
        assert predicate_to_dict(parse_success_conditions(raw)) == raw
