"""
Value Objects for Domain Layer.

Immutable descriptions of a composed read (QuerySpec) and of its
outcome (ResultEnvelope). They carry no identity and no behavior
beyond derived values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from query_composer.domain.criteria import (
    Criterion,
    Expansion,
    LogicalGroup,
    Projection,
    SortDirection,
)


# =============================================================================
# Type Aliases for improved readability
# =============================================================================

# Field path -> sort direction, in priority order
SortDict = Dict[str, SortDirection]

# Plain document as stored in / returned by a collection
Document = Dict[str, Any]


@dataclass(frozen=True)
class PaginationSpec:
    """Page window of a read."""

    page: int = 1
    limit: int = 10
    max_limit: int = 100

    def __post_init__(self) -> None:
        if self.max_limit < 1:
            raise ValueError(f"max_limit must be >= 1, got {self.max_limit}")
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if not 1 <= self.limit <= self.max_limit:
            raise ValueError(
                f"limit must be between 1 and {self.max_limit}, got {self.limit}"
            )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _describe_criterion(criterion: Criterion) -> Any:
    if isinstance(criterion, LogicalGroup):
        return [
            {k: _describe_criterion(v) for k, v in member.items()}
            for member in criterion.members
        ]
    operand = criterion.operand
    if hasattr(operand, "pattern"):
        operand = f"/{operand.pattern}/i"
    elif isinstance(operand, tuple):
        operand = list(operand)
    return {criterion.operator.value: operand}


@dataclass(frozen=True)
class QuerySpec:
    """Frozen snapshot of everything a builder accumulated."""

    criteria: Mapping[str, Criterion] = field(default_factory=lambda: MappingProxyType({}))
    sort: Mapping[str, SortDirection] = field(default_factory=lambda: MappingProxyType({}))
    pagination: PaginationSpec = field(default_factory=PaginationSpec)
    expansions: Tuple[Expansion, ...] = ()
    projection: Optional[Projection] = None

    def to_dict(self) -> Dict[str, Any]:
        """Plain, loggable description of the query."""
        projection = None
        if self.projection is not None:
            projection = list(self.projection.include) + [
                f"-{name}" for name in self.projection.exclude
            ]
        return {
            "criteria": {k: _describe_criterion(v) for k, v in self.criteria.items()},
            "sort": {k: int(v) for k, v in self.sort.items()},
            "pagination": {
                "page": self.pagination.page,
                "limit": self.pagination.limit,
                "skip": self.pagination.skip,
            },
            "expansions": [e.to_dict() for e in self.expansions],
            "projection": projection,
        }


class PaginationMeta(BaseModel):
    """Pagination block of the response envelope."""

    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    pages: int = Field(ge=0)
    has_more: bool = Field(alias="hasMore")

    model_config = {"frozen": True, "populate_by_name": True}

    @classmethod
    def from_counts(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        pages = math.ceil(total / limit)
        return cls(page=page, limit=limit, total=total, pages=pages, has_more=page < pages)


class ResultEnvelope(BaseModel):
    """Response of every read: one page of documents plus pagination."""

    data: List[Any] = Field(default_factory=list)
    pagination: PaginationMeta

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape: {"data": [...], "pagination": {..., "hasMore": bool}}."""
        return {
            "data": [
                doc.to_dict() if hasattr(doc, "to_dict") else doc for doc in self.data
            ],
            "pagination": self.pagination.model_dump(by_alias=True),
        }
