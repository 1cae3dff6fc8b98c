"""
Unit Tests for the Query Criteria Model.

Test Aspects Covered:
    ✅ Business Logic: Operator parsing, operand normalization, grouping
    ✅ Edge Cases: Unknown operators, invalid regex, "-field" projections
    ✅ Error Handling: UnsupportedOperatorError in strict mode
"""

from __future__ import annotations

import logging
import re

import pytest

from query_composer.domain.criteria import (
    Condition,
    Expansion,
    LogicalGroup,
    LogicalOperator,
    Operator,
    Projection,
    SortDirection,
    UnsupportedOperatorError,
    compile_pattern,
    normalize_criteria,
    split_fields,
)


class TestOperatorParsing:
    """Tests for the closed operator set."""

    @pytest.mark.parametrize("name", ["gte", "GTE", " gte "])
    def test_parses_known_names(self, name: str) -> None:
        assert Operator.parse(name) is Operator.GTE

    def test_unknown_operator_raises_in_strict_mode(self) -> None:
        """
        SCENARIO: Operator name outside the supported set
        EXPECTED: UnsupportedOperatorError carrying the name
        """
        with pytest.raises(UnsupportedOperatorError) as exc_info:
            Operator.parse("between")

        assert exc_info.value.operator == "between"
        assert isinstance(exc_info.value, ValueError)

    def test_unknown_operator_degrades_to_equality_when_lenient(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """
        SCENARIO: Unknown operator with strict=False
        EXPECTED: Equality, with a warning logged
        """
        with caplog.at_level(logging.WARNING):
            op = Operator.parse("between", strict=False)

        assert op is Operator.EQ
        assert "between" in caplog.text


class TestSortDirection:
    @pytest.mark.parametrize("value", ["asc", "ASC", "ascending", 1, SortDirection.ASC])
    def test_ascending_values(self, value) -> None:
        assert SortDirection.parse(value) is SortDirection.ASC

    @pytest.mark.parametrize("value", ["desc", "up", "", None, -1, 0, True])
    def test_everything_else_is_descending(self, value) -> None:
        assert SortDirection.parse(value) is SortDirection.DESC


class TestConditionCompile:
    """Tests for operand normalization."""

    def test_in_wraps_scalar_operand(self) -> None:
        condition = Condition.compile("BTC", Operator.IN)

        assert condition.operand == ("BTC",)

    def test_in_converts_list_to_tuple(self) -> None:
        condition = Condition.compile(["BTC", "ETH"], "in")

        assert condition.operator is Operator.IN
        assert condition.operand == ("BTC", "ETH")

    def test_regex_is_case_insensitive(self) -> None:
        condition = Condition.compile("bitcoin", Operator.REGEX)

        assert condition.operand.search("BITCOIN to the moon")

    def test_invalid_regex_matches_literally(self) -> None:
        """
        SCENARIO: Search text that is not a valid regular expression
        EXPECTED: Compiled as literal text, no exception
        """
        pattern = compile_pattern("(btc")

        assert pattern.search("watching (BTC closely")
        assert not pattern.search("btc")

    def test_exists_operand_is_boolean(self) -> None:
        assert Condition.compile("yes", Operator.EXISTS).operand is True
        assert Condition.compile(0, Operator.EXISTS).operand is False

    def test_conditions_are_immutable(self) -> None:
        condition = Condition.compile(5, Operator.GT)

        with pytest.raises(Exception):
            condition.operand = 6  # type: ignore[misc]


class TestNormalizeCriteria:
    def test_literals_and_patterns(self) -> None:
        criteria = normalize_criteria({"sentiment": "bullish", "content": re.compile("btc")})

        assert criteria["sentiment"] == Condition(Operator.EQ, "bullish")
        assert criteria["content"].operator is Operator.REGEX

    def test_nested_groups(self) -> None:
        criteria = normalize_criteria({"$or": [{"a": 1}, {"b": 2}]})

        group = criteria["$or"]
        assert isinstance(group, LogicalGroup)
        assert group.operator is LogicalOperator.OR
        assert len(group.members) == 2


class TestProjectionAndExpansion:
    def test_split_fields_accepts_spaces_commas_and_lists(self) -> None:
        assert split_fields("name  avatar,email") == ("name", "avatar", "email")
        assert split_fields(["name", " email "]) == ("name", "email")
        assert split_fields(None) == ()

    def test_projection_with_exclusions(self) -> None:
        projection = Projection.parse("name -password")

        assert projection.include == ("name",)
        assert projection.exclude == ("password",)

    def test_blank_projection_is_none(self) -> None:
        assert Projection.parse("  ") is None

    def test_expansion_from_mapping_with_nested(self) -> None:
        """
        SCENARIO: Relation-of-relation expansion given as a mapping
        EXPECTED: Nested Expansion built recursively
        """
        expansion = Expansion.of(
            {"path": "sharedPost", "nested": {"path": "userId", "select": "name avatar"}}
        )

        assert expansion.path == "sharedPost"
        assert expansion.select == ()
        assert expansion.nested == (Expansion("userId", ("name", "avatar")),)
        assert expansion.to_dict() == {
            "path": "sharedPost",
            "nested": [{"path": "userId", "select": "name avatar"}],
        }
