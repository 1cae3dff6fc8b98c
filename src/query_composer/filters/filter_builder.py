"""
Filter Builder - Generic Query Composition Engine.

Accumulates conditions, logical groups, sort priorities, pagination
bounds, a projection and relation expansions through chainable calls,
then executes them as one read against a Collection.

Usage:
    envelope = (
        FilterBuilder()
        .add_condition("asset.type", "crypto")
        .add_condition("likesCount", 10, Operator.GTE)
        .set_sort("createdAt")
        .set_pagination(page=2, limit=20)
        .execute(collection)
    )

Design Notes:
    - One instance per request; consumed once by execute()
    - Blank values and empty groups are no-ops, never "match nothing"
    - find() and count() share the exact same criteria
"""

from __future__ import annotations

import copy
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from query_composer.config.models import QueryConfig
from query_composer.domain.criteria import (
    Condition,
    Criterion,
    Expansion,
    LogicalGroup,
    LogicalOperator,
    Operator,
    Projection,
    SortDirection,
    normalize_criteria,
)
from query_composer.domain.value_objects import (
    PaginationMeta,
    PaginationSpec,
    QuerySpec,
    ResultEnvelope,
)
from query_composer.interfaces.collection import Collection
from query_composer.validation.param_parser import coerce_int

logger = logging.getLogger(__name__)


class FilterBuilder:
    """
    Chainable builder for filtered, sorted, paginated reads.

    Can be extended for specific entities (see PostFilter), which parse
    flat request parameters into calls on this builder.
    """

    def __init__(
        self,
        params: Optional[Mapping[str, Any]] = None,
        config: Optional[QueryConfig] = None,
    ) -> None:
        """
        Initialize an empty query.

        Args:
            params: Raw request parameters (kept for subclasses)
            config: Query configuration (defaults apply when omitted)
        """
        self.params: Dict[str, Any] = dict(params or {})
        self.config = config or QueryConfig()
        self._criteria: Dict[str, Criterion] = {}
        self._sort: Dict[str, SortDirection] = {}
        self._pagination = self._default_pagination()
        self._expansions: List[Expansion] = []
        self._projection: Optional[Projection] = None

    def _default_pagination(self) -> PaginationSpec:
        return PaginationSpec(
            page=1,
            limit=self.config.pagination.default_limit,
            max_limit=self.config.pagination.max_limit,
        )

    # =========================================================================
    # Conditions
    # =========================================================================

    def add_condition(
        self,
        field: str,
        value: Any,
        operator: Union[str, Operator] = Operator.EQ,
    ) -> "FilterBuilder":
        """
        Add (or replace) the condition on a field.

        Args:
            field: Field path, dotted for nested fields
            value: Operand; None and "" leave the query untouched
            operator: Comparison operator

        Returns:
            self

        Raises:
            UnsupportedOperatorError: Unknown operator with strict operators on
        """
        if value is None or (isinstance(value, str) and value == ""):
            return self

        self._criteria[field] = Condition.compile(
            value, operator, strict=self.config.filters.strict_operators
        )
        return self

    def add_or_group(self, conditions: Optional[Sequence[Mapping[str, Any]]]) -> "FilterBuilder":
        """Match documents satisfying any of the given sub-criteria."""
        return self._add_group(LogicalOperator.OR, conditions)

    def add_and_group(self, conditions: Optional[Sequence[Mapping[str, Any]]]) -> "FilterBuilder":
        """Match documents satisfying all of the given sub-criteria."""
        return self._add_group(LogicalOperator.AND, conditions)

    def _add_group(
        self,
        operator: LogicalOperator,
        conditions: Optional[Sequence[Mapping[str, Any]]],
    ) -> "FilterBuilder":
        if not conditions:
            return self

        strict = self.config.filters.strict_operators
        self._criteria[operator.value] = LogicalGroup(
            operator=operator,
            members=tuple(
                MappingProxyType(normalize_criteria(c, strict)) for c in conditions
            ),
        )
        return self

    # =========================================================================
    # Sorting
    # =========================================================================

    def set_sort(self, field: str, direction: Any = "desc") -> "FilterBuilder":
        """
        Set the direction of a sort key.

        New keys are appended after existing ones (lower priority).
        Anything other than an explicit ascending value sorts descending.
        """
        if not field:
            return self

        self._sort[field] = SortDirection.parse(direction)
        return self

    def add_sorts(self, sorts: Optional[Mapping[str, Any]]) -> "FilterBuilder":
        """Apply set_sort for each entry, in mapping order."""
        if not sorts or not isinstance(sorts, Mapping):
            return self

        for field, direction in sorts.items():
            self.set_sort(field, direction)
        return self

    def clear_sort(self) -> "FilterBuilder":
        self._sort = {}
        return self

    # =========================================================================
    # Pagination, projection, expansion
    # =========================================================================

    def set_pagination(
        self,
        page: Any = 1,
        limit: Any = None,
        max_limit: Optional[int] = None,
    ) -> "FilterBuilder":
        """
        Set the page window, clamping out-of-range values.

        Args:
            page: Page number (1-based); invalid values fall back to 1
            limit: Page size; invalid or zero values fall back to the default
            max_limit: Upper bound for limit (config value when omitted)

        Returns:
            self
        """
        if max_limit is None:
            max_limit = self.config.pagination.max_limit
        max_limit = max(1, int(max_limit))
        default_limit = min(self.config.pagination.default_limit, max_limit)

        page_number = coerce_int(page) or 1
        page_size = coerce_int(limit) or default_limit

        self._pagination = PaginationSpec(
            page=max(1, page_number),
            limit=min(max_limit, max(1, page_size)),
            max_limit=max_limit,
        )
        return self

    def add_expansion(
        self,
        path: Union[str, Expansion, Mapping[str, Any]],
        select: Union[str, Iterable[str], None] = None,
    ) -> "FilterBuilder":
        """
        Inline a referenced document into each result.

        Args:
            path: Reference field, an Expansion, or a mapping
                  {"path", "select", "nested"} for relation-of-relation
            select: Fields of the referenced document to keep
        """
        self._expansions.append(Expansion.of(path, select))
        return self

    def has_expansion(self, path: str) -> bool:
        return any(e.path == path for e in self._expansions)

    def set_projection(self, fields: Union[str, Iterable[str], None]) -> "FilterBuilder":
        """Restrict output fields ("a b", "a,b" or ["a", "b"]; "-a" excludes)."""
        self._projection = Projection.parse(fields)
        return self

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def criteria(self) -> Mapping[str, Criterion]:
        return MappingProxyType(self._criteria)

    @property
    def sort(self) -> Mapping[str, SortDirection]:
        return MappingProxyType(self._sort)

    @property
    def pagination(self) -> PaginationSpec:
        return self._pagination

    @property
    def expansions(self) -> tuple:
        return tuple(self._expansions)

    @property
    def projection(self) -> Optional[Projection]:
        return self._projection

    def build(self) -> QuerySpec:
        """Frozen snapshot of the query; later builder calls do not affect it."""
        return QuerySpec(
            criteria=MappingProxyType(dict(self._criteria)),
            sort=MappingProxyType(dict(self._sort)),
            pagination=self._pagination,
            expansions=tuple(self._expansions),
            projection=self._projection,
        )

    def summary(self) -> Dict[str, Any]:
        """Plain-dict description of the current configuration."""
        return self.build().to_dict()

    def reset(self) -> "FilterBuilder":
        """Drop every condition, sort, expansion and the projection."""
        self._criteria = {}
        self._sort = {}
        self._pagination = self._default_pagination()
        self._expansions = []
        self._projection = None
        return self

    def clone(self) -> "FilterBuilder":
        """Independent copy; mutating one does not affect the other."""
        cloned = copy.copy(self)
        cloned.params = dict(self.params)
        cloned._criteria = dict(self._criteria)
        cloned._sort = dict(self._sort)
        cloned._expansions = list(self._expansions)
        return cloned

    # =========================================================================
    # Execution
    # =========================================================================

    def execute(self, collection: Collection, lean: bool = True) -> ResultEnvelope:
        """
        Run the query: one page of documents plus the total match count.

        Args:
            collection: Collection to read from
            lean: Plain dicts when True, store-bound handles otherwise

        Returns:
            ResultEnvelope with data and pagination

        Raises:
            Exception: Any failure of find() or count(), unmodified
        """
        spec = self.build()
        start = time.perf_counter()

        def read_documents() -> List[Any]:
            return collection.find(
                spec.criteria,
                sort=spec.sort,
                skip=spec.pagination.skip,
                limit=spec.pagination.limit,
                projection=spec.projection,
                expansions=spec.expansions,
                lean=lean,
            )

        def count_documents() -> int:
            return collection.count(spec.criteria)

        if self.config.execution.parallel_reads:
            with ThreadPoolExecutor(max_workers=2) as executor:
                documents_future = executor.submit(read_documents)
                total_future = executor.submit(count_documents)
                documents = documents_future.result()
                total = total_future.result()
        else:
            documents = read_documents()
            total = count_documents()

        logger.debug(
            f"Executed query: {len(documents)} of {total} documents "
            f"(page={spec.pagination.page}, limit={spec.pagination.limit}) "
            f"in {time.perf_counter() - start:.4f}s"
        )

        return ResultEnvelope(
            data=list(documents),
            pagination=PaginationMeta.from_counts(
                spec.pagination.page, spec.pagination.limit, total
            ),
        )
