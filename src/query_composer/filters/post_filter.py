"""
Post Filter - Feed Query Parameters mapped onto the FilterBuilder.

Parameters (all optional, unknown ones ignored):
    - assetType: crypto/stock ("all" means no filter)
    - assetSymbol: ticker, case-insensitive
    - userId: author
    - tag: case-insensitive tag match
    - sentiment: bullish/bearish/neutral ("all" means no filter)
    - visibility: public/followers/private, only when supplied
    - search: matches content or tags
    - sortBy, sortOrder: sort key from the allow-list
    - page, limit: pagination
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from query_composer.config.models import QueryConfig
from query_composer.domain.criteria import Condition, Operator
from query_composer.domain.value_objects import QuerySpec, ResultEnvelope
from query_composer.filters.filter_builder import FilterBuilder
from query_composer.interfaces.collection import Collection
from query_composer.validation.param_parser import get_param, log_ignored_params

logger = logging.getLogger(__name__)


class PostFilter(FilterBuilder):
    """Filter builder for the post feed."""

    PARAMETERS = (
        "assetType",
        "assetSymbol",
        "userId",
        "tag",
        "sentiment",
        "visibility",
        "sortBy",
        "sortOrder",
        "page",
        "limit",
        "search",
    )

    def __init__(
        self,
        params: Optional[Mapping[str, Any]] = None,
        config: Optional[QueryConfig] = None,
    ) -> None:
        super().__init__(params, config)
        self.settings = self.config.post_filter

        # Newest first unless the request says otherwise
        self.set_sort(self.settings.default_sort_field, "desc")

        self.parse_params(self.params)

    def parse_params(self, params: Mapping[str, Any]) -> "PostFilter":
        """Apply every recognized parameter; each one is independent."""
        log_ignored_params(params, self.PARAMETERS, "post")

        asset_type = get_param(params, "assetType")
        if asset_type and asset_type != "all":
            self.filter_by_asset_type(asset_type)

        asset_symbol = get_param(params, "assetSymbol")
        if asset_symbol:
            self.filter_by_asset_symbol(asset_symbol)

        user_id = get_param(params, "userId")
        if user_id:
            self.filter_by_user(user_id)

        tag = get_param(params, "tag")
        if tag:
            self.filter_by_tag(tag)

        sentiment = get_param(params, "sentiment")
        if sentiment and sentiment != "all":
            self.filter_by_sentiment(sentiment)

        # No default here: callers wanting public posts only must say so
        visibility = get_param(params, "visibility")
        if visibility:
            self.filter_by_visibility(visibility)

        search = get_param(params, "search")
        if search:
            self.filter_by_search(search)

        sort_by = get_param(params, "sortBy")
        if sort_by:
            self.set_sorting(sort_by, get_param(params, "sortOrder"))

        page = get_param(params, "page")
        limit = get_param(params, "limit")
        if page is not None or limit is not None:
            self.set_pagination(page, limit)

        return self

    def filter_by_asset_type(self, asset_type: str) -> "PostFilter":
        return self.add_condition("asset.type", asset_type)

    def filter_by_asset_symbol(self, symbol: str) -> "PostFilter":
        """Symbols are stored upper-case."""
        return self.add_condition("asset.symbol", str(symbol).upper())

    def filter_by_user(self, user_id: str) -> "PostFilter":
        return self.add_condition("userId", user_id)

    def filter_by_tag(self, tag: str) -> "PostFilter":
        return self.add_condition("tags", tag, Operator.REGEX)

    def filter_by_sentiment(self, sentiment: str) -> "PostFilter":
        return self.add_condition("sentiment", sentiment)

    def filter_by_visibility(self, visibility: str) -> "PostFilter":
        return self.add_condition("visibility", visibility)

    def filter_by_search(self, query: str) -> "PostFilter":
        """Posts whose content or tags match the query."""
        pattern = Condition.compile(query, Operator.REGEX)
        return self.add_or_group([{"content": pattern}, {"tags": pattern}])

    def set_sorting(self, sort_by: str, sort_order: Any = "desc") -> "PostFilter":
        """
        Replace the sort with an allow-listed key.

        Unknown keys are ignored and the current sort stays. A primary
        key other than createdAt gets createdAt descending as tie-break.
        """
        if sort_by not in self.settings.sortable_fields:
            logger.debug(f"Ignoring sortBy={sort_by!r}, not in allow-list")
            return self

        self.clear_sort()
        self.set_sort(sort_by, sort_order or "desc")

        if sort_by != self.settings.default_sort_field:
            self.set_sort(self.settings.default_sort_field, "desc")
        return self

    def exclude_hidden(self) -> "PostFilter":
        """Drop posts hidden by moderation."""
        return self.add_condition("isHidden", False)

    def _install_author_expansion(self) -> None:
        if not self.has_expansion("userId"):
            self.add_expansion("userId", self.settings.author_fields)

    def _install_repost_expansion(self) -> None:
        if not self.has_expansion("sharedPost"):
            self.add_expansion(
                {
                    "path": "sharedPost",
                    "nested": {"path": "userId", "select": self.settings.author_fields},
                }
            )

    def build_query(self) -> QuerySpec:
        """Snapshot including the author expansion."""
        self._install_author_expansion()
        return self.build()

    def execute(self, collection: Collection, lean: bool = True) -> ResultEnvelope:
        """Execute with the author and repost expansions installed."""
        self._install_author_expansion()
        self._install_repost_expansion()
        return super().execute(collection, lean)
