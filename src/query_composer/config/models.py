"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, model_validator


class PaginationConfig(BaseModel):
    """Pagination defaults shared by every filter."""

    default_limit: int = Field(default=10, ge=1)
    max_limit: int = Field(default=100, ge=1)

    @model_validator(mode="after")
    def _default_within_max(self) -> "PaginationConfig":
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit must not exceed max_limit")
        return self


class ExecutionConfig(BaseModel):
    """How a composed read is issued against a collection."""

    parallel_reads: bool = True
    lean: bool = True


class FilterBehaviorConfig(BaseModel):
    """Generic condition handling."""

    strict_operators: bool = True


class PostFilterConfig(BaseModel):
    """Configuration for the post filter."""

    sortable_fields: List[str] = Field(
        default_factory=lambda: ["createdAt", "likesCount", "commentsCount", "sharesCount"]
    )
    default_sort_field: str = "createdAt"
    author_fields: List[str] = Field(default_factory=lambda: ["name", "avatar", "email"])
    exclude_hidden: bool = True


class ModerationFilterConfig(BaseModel):
    """Configuration for the user and comment listings."""

    default_limit: int = Field(default=20, ge=1)
    author_fields: List[str] = Field(default_factory=lambda: ["name", "email", "avatar"])
    post_fields: List[str] = Field(default_factory=lambda: ["content", "asset.symbol"])
    hidden_user_fields: List[str] = Field(default_factory=lambda: ["password"])


class QueryConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    filters: FilterBehaviorConfig = Field(default_factory=FilterBehaviorConfig)
    post_filter: PostFilterConfig = Field(default_factory=PostFilterConfig)
    moderation: ModerationFilterConfig = Field(default_factory=ModerationFilterConfig)

    model_config = {"populate_by_name": True}
