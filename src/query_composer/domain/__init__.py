"""
Domain Layer - Query Model and Documents.

Contains the building blocks of a composed read and the documents it
is composed against.

Modules:
    - criteria: Operators, conditions, groups, sort, projection, expansion
    - value_objects: QuerySpec, PaginationSpec, ResultEnvelope
    - entities: UserProfile, Post, Comment and their enums
"""

from query_composer.domain.criteria import (
    Condition,
    Criteria,
    Expansion,
    LogicalGroup,
    LogicalOperator,
    Operator,
    Projection,
    SortDirection,
    UnsupportedOperatorError,
)
from query_composer.domain.value_objects import (
    PaginationMeta,
    PaginationSpec,
    QuerySpec,
    ResultEnvelope,
)

__all__ = [
    "Condition",
    "Criteria",
    "Expansion",
    "LogicalGroup",
    "LogicalOperator",
    "Operator",
    "PaginationMeta",
    "PaginationSpec",
    "Projection",
    "QuerySpec",
    "ResultEnvelope",
    "SortDirection",
    "UnsupportedOperatorError",
]
