"""
Unit Tests for the Moderation Listings (UserFilter, CommentFilter).

Test Aspects Covered:
    ✅ Business Logic: Search, role/active filters, expansions
    ✅ Edge Cases: Unrecognized boolean flags, default page size
    ✅ Security: Password hash never returned
"""

from __future__ import annotations

from typing import List

import pytest

from query_composer.config.models import ModerationFilterConfig, QueryConfig
from query_composer.domain.criteria import SortDirection
from query_composer.filters.moderation_filters import (
    CommentFilter,
    UserFilter,
    _ModerationFilter,
)


def ids(envelope) -> List[str]:
    return [doc["_id"] for doc in envelope.data]


class TestUserFilter:
    def test_defaults(self, users) -> None:
        """
        SCENARIO: No parameters
        EXPECTED: All users, newest first, 20 per page, no password
        """
        user_filter = UserFilter({})
        envelope = user_filter.execute(users)

        assert ids(envelope) == ["u3", "u2", "u1"]
        assert envelope.pagination.limit == 20
        assert dict(user_filter.sort) == {"createdAt": SortDirection.DESC}
        assert all("password" not in doc for doc in envelope.data)
        assert envelope.data[0]["email"] == "carla@corp.example"

    def test_search_matches_name_or_email(self, users) -> None:
        assert ids(UserFilter({"search": "ALICE"}).execute(users)) == ["u1"]
        assert ids(UserFilter({"search": "corp"}).execute(users)) == ["u3"]

    def test_role(self, users) -> None:
        assert ids(UserFilter({"role": "admin"}).execute(users)) == ["u3"]

    def test_is_active_flag(self, users) -> None:
        assert ids(UserFilter({"isActive": "false"}).execute(users)) == ["u2"]
        assert ids(UserFilter({"isActive": "true"}).execute(users)) == ["u3", "u1"]

    def test_unrecognized_flag_is_ignored(self) -> None:
        user_filter = UserFilter({"isActive": "maybe"})

        assert "isActive" not in user_filter.criteria

    def test_pagination_uses_moderation_default(self) -> None:
        config = QueryConfig(moderation=ModerationFilterConfig(default_limit=5))

        assert UserFilter({"page": "2"}, config).pagination.limit == 5
        assert UserFilter({"limit": "7"}, config).pagination.limit == 7
        assert UserFilter({"limit": "500"}, config).pagination.limit == 100


class TestCommentFilter:
    def test_filter_by_post(self, comments) -> None:
        envelope = CommentFilter({"postId": "p00"}).execute(comments)

        assert ids(envelope) == ["c2", "c1"]

    def test_search_content(self, comments) -> None:
        assert ids(CommentFilter({"search": "CHART"}).execute(comments)) == ["c3"]

    def test_filter_by_user(self, comments) -> None:
        assert ids(CommentFilter({"userId": "u2"}).execute(comments)) == ["c1"]

    def test_author_and_post_expanded(self, comments) -> None:
        """
        SCENARIO: Comment listing
        EXPECTED: Author with name/email/avatar, post with content and symbol
        """
        envelope = CommentFilter({"userId": "u3"}).execute(comments)
        comment = envelope.data[0]

        assert comment["userId"] == {
            "_id": "u3",
            "name": "Carla Admin",
            "email": "carla@corp.example",
            "avatar": None,
        }
        assert comment["postId"] == {
            "_id": "p00",
            "content": "Post 0 about BTC",
            "asset": {"symbol": "BTC"},
        }


def test_listing_must_define_its_parameters() -> None:
    """
    SCENARIO: A moderation listing subclass without parse_params
    EXPECTED: Cannot be instantiated
    """
    class Incomplete(_ModerationFilter):
        ENTITY = "audit"

    with pytest.raises(TypeError, match="abstract"):
        Incomplete({})
