"""
Collection Protocol.

Defines the abstract interface for the document store a composed read
is executed against. Any store (in-memory, remote document database,
anything else) can be used as long as find() and count() honor the
same criteria semantics.

The collection is responsible for:
    - Matching documents against compiled criteria
    - Ordering by the sort mapping (first key is the primary key)
    - Applying skip/limit, projection and relation expansions

Design Notes:
    - Uses typing.Protocol for structural subtyping
    - count() takes criteria only, never pagination
    - Failures are raised to the caller as-is
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from query_composer.domain.criteria import Criterion, Expansion, Projection, SortDirection


@runtime_checkable
class Collection(Protocol):
    """Abstract interface for a queryable document collection."""

    def find(
        self,
        criteria: Mapping[str, Criterion],
        *,
        sort: Optional[Mapping[str, SortDirection]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
        projection: Optional[Projection] = None,
        expansions: Sequence[Expansion] = (),
        lean: bool = True,
    ) -> List[Any]:
        """
        Read one window of matching documents.

        Args:
            criteria: Compiled criteria
            sort: Ordered field -> direction mapping
            skip: Number of matching documents to skip
            limit: Maximum number of documents to return
            projection: Fields to include/exclude
            expansions: Relations to inline into each document
            lean: Plain dicts when True, store-bound handles otherwise

        Returns:
            Matching documents in sort order
        """
        ...

    def count(self, criteria: Mapping[str, Criterion]) -> int:
        """
        Count all documents matching criteria.

        Args:
            criteria: Compiled criteria (same semantics as find)

        Returns:
            Number of matching documents
        """
        ...
