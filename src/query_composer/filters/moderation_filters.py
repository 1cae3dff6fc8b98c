"""
Moderation Filters - User and Comment Listings.

Admin/moderator listings expressed on the same FilterBuilder as the
feed: newest first, 20 per page by default, and a case-insensitive
search over the entity's text fields.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from query_composer.config.models import QueryConfig
from query_composer.domain.criteria import Condition, Operator
from query_composer.filters.filter_builder import FilterBuilder
from query_composer.validation.param_parser import (
    coerce_bool,
    get_param,
    log_ignored_params,
)


class _ModerationFilter(FilterBuilder, ABC):
    """Shared defaults for moderation listings."""

    ENTITY = ""
    PARAMETERS: tuple = ("page", "limit", "search")

    def __init__(
        self,
        params: Optional[Mapping[str, Any]] = None,
        config: Optional[QueryConfig] = None,
    ) -> None:
        super().__init__(params, config)
        self.settings = self.config.moderation
        self.set_sort("createdAt", "desc")
        self.set_pagination(1, self.settings.default_limit)

        log_ignored_params(self.params, self.PARAMETERS, self.ENTITY)
        self.parse_params(self.params)

        page = get_param(self.params, "page")
        limit = get_param(self.params, "limit")
        if page is not None or limit is not None:
            self.set_pagination(page, limit if limit is not None else self.settings.default_limit)

    @abstractmethod
    def parse_params(self, params: Mapping[str, Any]) -> "_ModerationFilter":
        """Apply the listing's own parameters to the builder."""


class UserFilter(_ModerationFilter):
    """User listing: search by name/email, role, active flag; no password."""

    ENTITY = "user"
    PARAMETERS = ("page", "limit", "search", "role", "isActive")

    def parse_params(self, params: Mapping[str, Any]) -> "UserFilter":
        search = get_param(params, "search")
        if search:
            pattern = Condition.compile(search, Operator.REGEX)
            self.add_or_group([{"name": pattern}, {"email": pattern}])

        self.add_condition("role", get_param(params, "role"))
        self.add_condition("isActive", coerce_bool(get_param(params, "isActive")))

        self.set_projection([f"-{name}" for name in self.settings.hidden_user_fields])
        return self


class CommentFilter(_ModerationFilter):
    """Comment listing with author and parent-post expansions."""

    ENTITY = "comment"
    PARAMETERS = ("page", "limit", "search", "postId", "userId")

    def parse_params(self, params: Mapping[str, Any]) -> "CommentFilter":
        self.add_condition("content", get_param(params, "search"), Operator.REGEX)
        self.add_condition("postId", get_param(params, "postId"))
        self.add_condition("userId", get_param(params, "userId"))

        self.add_expansion("userId", self.settings.author_fields)
        self.add_expansion("postId", self.settings.post_fields)
        return self
