"""
Unit Tests for InMemoryCollection.

Test Aspects Covered:
    ✅ Business Logic: Operator matching, groups, multi-key sort
    ✅ Edge Cases: Missing fields, arrays, None ordering, dangling refs
    ✅ Error Handling: Missing and duplicate ids
"""

from __future__ import annotations

from datetime import datetime

import pytest

from query_composer.adapters.memory_collection import (
    DocumentHandle,
    InMemoryCollection,
    apply_projection,
    match_criteria,
    resolve_path,
    sort_documents,
)
from query_composer.domain.criteria import (
    Condition,
    Expansion,
    Operator,
    Projection,
    SortDirection,
    normalize_criteria,
)
from query_composer.interfaces.collection import Collection

DOC = {
    "_id": "d1",
    "score": 7,
    "tags": ["btc", "news"],
    "asset": {"symbol": "BTC"},
    "items": [{"qty": 1}, {"qty": 5}],
    "note": None,
}


def matches(criteria) -> bool:
    return match_criteria(DOC, normalize_criteria(criteria))


class TestMatching:
    @pytest.mark.parametrize(
        "criteria,expected",
        [
            ({"score": 7}, True),
            ({"asset.symbol": "BTC"}, True),
            ({"tags": "news"}, True),
            ({"tags": "eth"}, False),
            ({"missing": None}, True),
            ({"note": None}, True),
            ({"score": Condition(Operator.NE, 7)}, False),
            ({"score": Condition(Operator.GT, 5)}, True),
            ({"score": Condition(Operator.LTE, 6)}, False),
            ({"score": Condition(Operator.GT, "x")}, False),
            ({"note": Condition(Operator.GT, 0)}, False),
            ({"items.qty": Condition(Operator.GTE, 5)}, True),
            ({"asset.symbol": Condition(Operator.IN, ("ETH", "BTC"))}, True),
            ({"tags": Condition(Operator.NIN, ("eth", "news"))}, False),
            ({"missing": Condition(Operator.EXISTS, False)}, True),
            ({"note": Condition(Operator.EXISTS, True)}, True),
            ({"tags": Condition.compile("NEW", Operator.REGEX)}, True),
            ({"score": Condition.compile("7", Operator.REGEX)}, False),
        ],
    )
    def test_conditions(self, criteria, expected: bool) -> None:
        assert matches(criteria) is expected

    def test_or_and_groups(self) -> None:
        assert matches({"$or": [{"score": 1}, {"tags": "btc"}]})
        assert not matches({"$or": [{"score": 1}, {"tags": "eth"}]})
        assert not matches({"$and": [{"score": 7}, {"tags": "eth"}]})

    def test_resolve_path_fans_out_over_arrays(self) -> None:
        assert resolve_path(DOC, "items.qty") == [1, 5]


class TestSorting:
    def test_multi_key_sort(self) -> None:
        docs = [
            {"_id": 1, "likes": 2, "at": 1},
            {"_id": 2, "likes": 5, "at": 2},
            {"_id": 3, "likes": 2, "at": 3},
        ]

        ordered = sort_documents(
            docs, {"likes": SortDirection.DESC, "at": SortDirection.DESC}
        )

        assert [d["_id"] for d in ordered] == [2, 3, 1]

    def test_missing_values_sort_lowest(self) -> None:
        docs = [{"_id": 1, "v": 3}, {"_id": 2}, {"_id": 3, "v": None}, {"_id": 4, "v": 1}]

        ascending = sort_documents(docs, {"v": SortDirection.ASC})

        assert [d["_id"] for d in ascending] == [2, 3, 4, 1]

    def test_mixed_types_order_by_type(self) -> None:
        """
        SCENARIO: One field holds numbers, strings, booleans and None
        EXPECTED: No TypeError; None < numbers < strings < booleans
        """
        docs = [
            {"_id": 1, "v": "many"},
            {"_id": 2, "v": 3},
            {"_id": 3, "v": True},
            {"_id": 4, "v": None},
            {"_id": 5, "v": 1.5},
            {"_id": 6, "v": "few"},
        ]

        ascending = sort_documents(docs, {"v": SortDirection.ASC})
        descending = sort_documents(docs, {"v": SortDirection.DESC})

        assert [d["_id"] for d in ascending] == [4, 5, 2, 6, 1, 3]
        assert [d["_id"] for d in descending] == [3, 1, 6, 2, 5, 4]

    def test_find_sorts_mixed_type_field(self) -> None:
        collection = InMemoryCollection(
            "posts", [{"_id": 1, "likesCount": 3}, {"_id": 2, "likesCount": "many"}]
        )

        docs = collection.find({}, sort={"likesCount": SortDirection.DESC})

        assert [d["_id"] for d in docs] == [2, 1]

    def test_no_sort_keeps_insertion_order(self) -> None:
        docs = [{"_id": 2}, {"_id": 1}]

        assert sort_documents(docs, None) == docs


class TestProjection:
    def test_include_keeps_id(self) -> None:
        result = apply_projection(DOC, Projection(include=("score", "asset.symbol")))

        assert result == {"_id": "d1", "score": 7, "asset": {"symbol": "BTC"}}

    def test_exclude(self) -> None:
        result = apply_projection(DOC, Projection(exclude=("tags", "asset.symbol")))

        assert "tags" not in result
        assert result["asset"] == {}
        assert result["score"] == 7

    def test_mixed_include_and_exclude(self) -> None:
        """
        SCENARIO: "score asset -asset.symbol -_id"
        EXPECTED: Inclusions applied, then the exclusions removed from them
        """
        projection = Projection.parse("score asset -asset.symbol -_id")

        result = apply_projection(DOC, projection)

        assert result == {"score": 7, "asset": {}}

    def test_exclusion_of_field_not_included_is_harmless(self) -> None:
        result = apply_projection(DOC, Projection.parse("score -note"))

        assert result == {"_id": "d1", "score": 7}

    def test_projection_returns_copy(self) -> None:
        result = apply_projection(DOC, None)
        result["tags"].append("eth")

        assert DOC["tags"] == ["btc", "news"]


class TestCollection:
    @pytest.fixture
    def authors(self) -> InMemoryCollection:
        return InMemoryCollection("authors", [{"_id": "a1", "name": "Ann", "secret": "x"}])

    @pytest.fixture
    def articles(self, authors: InMemoryCollection) -> InMemoryCollection:
        collection = InMemoryCollection(
            "articles",
            [
                {"_id": "x1", "authorId": "a1", "at": datetime(2024, 1, 1)},
                {"_id": "x2", "authorId": "gone", "at": datetime(2024, 1, 2)},
                {"_id": "x3", "at": datetime(2024, 1, 3)},
            ],
        )
        return collection.relate("authorId", authors)

    def test_satisfies_collection_protocol(self, articles) -> None:
        assert isinstance(articles, Collection)

    def test_find_window_and_count(self, articles) -> None:
        docs = articles.find({}, sort={"at": SortDirection.DESC}, skip=1, limit=1)

        assert [d["_id"] for d in docs] == ["x2"]
        assert articles.count({}) == 3

    def test_expansion_with_select(self, articles) -> None:
        docs = articles.find({"_id": Condition(Operator.EQ, "x1")}, expansions=(Expansion("authorId", ("name",)),))

        assert docs[0]["authorId"] == {"_id": "a1", "name": "Ann"}

    def test_dangling_reference_becomes_none(self, articles) -> None:
        """
        SCENARIO: Referenced document does not exist
        EXPECTED: Field set to None, read does not fail
        """
        docs = articles.find({"_id": Condition(Operator.EQ, "x2")}, expansions=(Expansion("authorId"),))

        assert docs[0]["authorId"] is None

    def test_missing_reference_field_untouched(self, articles) -> None:
        docs = articles.find({"_id": Condition(Operator.EQ, "x3")}, expansions=(Expansion("authorId"),))

        assert "authorId" not in docs[0]

    def test_results_are_copies(self, articles) -> None:
        articles.find({})[0]["authorId"] = "changed"

        assert articles.get("x1")["authorId"] == "a1"

    def test_non_lean_results_are_handles(self, articles) -> None:
        docs = articles.find({}, limit=1, lean=False)

        handle = docs[0]
        assert isinstance(handle, DocumentHandle)
        assert handle.id == "x1"
        assert handle.reload()["authorId"] == "a1"
        assert handle.to_dict()["_id"] == "x1"

    def test_insert_requires_id(self) -> None:
        with pytest.raises(ValueError):
            InMemoryCollection("c").insert({"name": "no id"})

    def test_duplicate_id_rejected(self, authors) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            authors.insert({"_id": "a1"})
