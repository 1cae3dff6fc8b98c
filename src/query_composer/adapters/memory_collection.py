"""
In-Memory Collection.

A thread-safe document collection implementing the Collection protocol
with document-store semantics, for development, testing and small
embedded datasets.

Matching rules:
    - Field paths are dotted ("asset.symbol")
    - An array field matches when any element matches
    - Equality with None also matches a missing field
    - Ordering comparisons never match None or incomparable values

Sorting is stable and multi-key; None/missing values sort lowest and
mixed-type fields are ordered by type before value.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping as MappingABC
from datetime import datetime
from numbers import Real
from threading import RLock
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from query_composer.domain.criteria import (
    Condition,
    Criterion,
    Expansion,
    LogicalGroup,
    LogicalOperator,
    Operator,
    Projection,
    SortDirection,
)
from query_composer.domain.value_objects import Document

logger = logging.getLogger(__name__)

_MISSING = object()


def resolve_path(document: Mapping[str, Any], path: str) -> Any:
    """Value at a dotted path; arrays along the way fan out into a list."""
    current: Any = document
    for part in path.split("."):
        if isinstance(current, list):
            values = [resolve_path(item, part) for item in current if isinstance(item, Mapping)]
            values = [v for v in values if v is not _MISSING]
            if not values:
                return _MISSING
            current = values
        elif isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return _MISSING
    return current


def _set_path(document: Dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    target = document
    for part in parts[:-1]:
        target = target.setdefault(part, {})
    target[parts[-1]] = value


def _delete_path(document: Dict[str, Any], path: str) -> None:
    parts = path.split(".")
    target: Any = document
    for part in parts[:-1]:
        target = target.get(part) if isinstance(target, dict) else None
        if target is None:
            return
    if isinstance(target, dict):
        target.pop(parts[-1], None)


def _equals(actual: Any, expected: Any) -> bool:
    if actual is _MISSING:
        return expected is None
    if actual == expected:
        return True
    if isinstance(actual, list):
        return any(item == expected for item in actual)
    return False


def _compare(actual: Any, operand: Any, check: Callable[[Any, Any], bool]) -> bool:
    candidates = actual if isinstance(actual, list) else [actual]
    for candidate in candidates:
        if candidate is None or candidate is _MISSING:
            continue
        try:
            if check(candidate, operand):
                return True
        except TypeError:
            continue
    return False


_ORDERING: Dict[Operator, Callable[[Any, Any], bool]] = {
    Operator.GT: lambda a, b: a > b,
    Operator.GTE: lambda a, b: a >= b,
    Operator.LT: lambda a, b: a < b,
    Operator.LTE: lambda a, b: a <= b,
}


def match_condition(actual: Any, condition: Condition) -> bool:
    """Check one resolved field value against a compiled condition."""
    op = condition.operator
    operand = condition.operand

    if op is Operator.EQ:
        return _equals(actual, operand)
    if op is Operator.NE:
        return not _equals(actual, operand)
    if op is Operator.IN:
        return any(_equals(actual, value) for value in operand)
    if op is Operator.NIN:
        return not any(_equals(actual, value) for value in operand)
    if op is Operator.EXISTS:
        return (actual is not _MISSING) is operand
    if op is Operator.REGEX:
        candidates = actual if isinstance(actual, list) else [actual]
        return any(isinstance(c, str) and operand.search(c) is not None for c in candidates)
    return _compare(actual, operand, _ORDERING[op])


def match_criteria(document: Mapping[str, Any], criteria: Mapping[str, Criterion]) -> bool:
    """True if the document satisfies every entry of the criteria."""
    for key, criterion in criteria.items():
        if isinstance(criterion, LogicalGroup):
            results = (match_criteria(document, member) for member in criterion.members)
            if criterion.operator is LogicalOperator.OR:
                matched = any(results)
            else:
                matched = all(results)
        else:
            matched = match_condition(resolve_path(document, key), criterion)
        if not matched:
            return False
    return True


def _sort_key(value: Any) -> tuple:
    """Order across types: missing/None, numbers, strings, objects, arrays, booleans, dates."""
    if value is _MISSING or value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (5, value)
    if isinstance(value, Real):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    if isinstance(value, Mapping):
        return (3, tuple((str(k), _sort_key(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return (4, tuple(_sort_key(v) for v in value))
    if isinstance(value, datetime):
        return (6, value.timestamp())
    return (7, type(value).__name__, repr(value))


def sort_documents(
    documents: Iterable[Mapping[str, Any]],
    sort: Optional[Mapping[str, SortDirection]],
) -> List[Mapping[str, Any]]:
    """Stable multi-key sort; the first key of the mapping has priority."""
    ordered = list(documents)
    for field, direction in reversed(list((sort or {}).items())):
        ordered.sort(
            key=lambda doc, f=field: _sort_key(resolve_path(doc, f)),
            reverse=direction is SortDirection.DESC,
        )
    return ordered


def apply_projection(
    document: Mapping[str, Any],
    projection: Optional[Projection],
    id_field: str = "_id",
) -> Dict[str, Any]:
    """
    Copy of the document reduced to the projection.

    Inclusions are applied first and always keep the id; exclusions are
    then removed from what is left, so "name -password" keeps only name
    and id, and "name -_id" drops the id as well.
    """
    if projection is None or projection.is_empty:
        return copy.deepcopy(dict(document))

    if projection.include:
        result: Dict[str, Any] = {}
        if id_field in document:
            result[id_field] = copy.deepcopy(document[id_field])
        for path in projection.include:
            value = resolve_path(document, path)
            if value is not _MISSING:
                _set_path(result, path, copy.deepcopy(value))
    else:
        result = copy.deepcopy(dict(document))

    for path in projection.exclude:
        _delete_path(result, path)
    return result


class DocumentHandle(MappingABC):
    """Read-only document bound to the collection it was read from."""

    def __init__(self, document: Dict[str, Any], collection: "InMemoryCollection") -> None:
        self._document = document
        self.collection = collection

    @property
    def id(self) -> Any:
        return self._document.get(self.collection.id_field)

    def __getitem__(self, key: str) -> Any:
        return self._document[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._document)

    def __len__(self) -> int:
        return len(self._document)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._document)

    def reload(self) -> Optional["DocumentHandle"]:
        """Fresh copy of this document from the collection."""
        document = self.collection.get(self.id)
        return DocumentHandle(document, self.collection) if document is not None else None

    def __repr__(self) -> str:
        return f"DocumentHandle({self.collection.name}, {self.id!r})"


class InMemoryCollection:
    """Document collection held in memory."""

    def __init__(
        self,
        name: str,
        documents: Optional[Iterable[Mapping[str, Any]]] = None,
        id_field: str = "_id",
    ) -> None:
        """
        Initialize collection.

        Args:
            name: Collection name (for logs and handles)
            documents: Initial documents
            id_field: Key holding each document's identifier
        """
        self.name = name
        self.id_field = id_field
        self._documents: List[Document] = []
        self._index: Dict[Any, Document] = {}
        self._relations: Dict[str, InMemoryCollection] = {}
        self._lock = RLock()
        if documents:
            self.insert_many(documents)

    # =========================================================================
    # Writes and relations
    # =========================================================================

    def insert(self, document: Mapping[str, Any]) -> Any:
        """Store a copy of the document; returns its id."""
        if self.id_field not in document:
            raise ValueError(f"Document for {self.name} has no '{self.id_field}'")
        stored = copy.deepcopy(dict(document))
        doc_id = stored[self.id_field]
        with self._lock:
            if doc_id in self._index:
                raise ValueError(f"Duplicate id {doc_id!r} in {self.name}")
            self._documents.append(stored)
            self._index[doc_id] = stored
        return doc_id

    def insert_many(self, documents: Iterable[Mapping[str, Any]]) -> List[Any]:
        return [self.insert(doc) for doc in documents]

    def relate(self, path: str, target: "InMemoryCollection") -> "InMemoryCollection":
        """Declare that `path` holds ids of documents in `target`."""
        with self._lock:
            self._relations[path] = target
        return self

    def get(self, doc_id: Any) -> Optional[Document]:
        with self._lock:
            document = self._index.get(doc_id)
            return copy.deepcopy(document) if document is not None else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)

    # =========================================================================
    # Collection protocol
    # =========================================================================

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
        """Read one window of matching documents."""
        with self._lock:
            matched = [doc for doc in self._documents if match_criteria(doc, criteria)]

        ordered = sort_documents(matched, sort)
        end = None if limit is None else skip + limit
        window = ordered[skip:end]

        results = []
        for document in window:
            output = apply_projection(document, projection, self.id_field)
            self._expand(output, expansions)
            results.append(output if lean else DocumentHandle(output, self))
        return results

    def count(self, criteria: Mapping[str, Criterion]) -> int:
        with self._lock:
            return sum(1 for doc in self._documents if match_criteria(doc, criteria))

    # =========================================================================
    # Expansion
    # =========================================================================

    def _expand(self, document: Dict[str, Any], expansions: Sequence[Expansion]) -> None:
        for expansion in expansions:
            target = self._relations.get(expansion.path)
            if target is None:
                logger.debug(f"{self.name}: no relation for '{expansion.path}', not expanded")
                continue
            reference = resolve_path(document, expansion.path)
            if reference is _MISSING or reference is None:
                continue
            if isinstance(reference, list):
                expanded: Any = [
                    doc for doc in (target._resolve(ref, expansion) for ref in reference)
                    if doc is not None
                ]
            else:
                expanded = target._resolve(reference, expansion)
            _set_path(document, expansion.path, expanded)

    def _resolve(self, doc_id: Any, expansion: Expansion) -> Optional[Dict[str, Any]]:
        with self._lock:
            source = self._index.get(doc_id)
        if source is None:
            return None
        projection = Projection(include=expansion.select) if expansion.select else None
        document = apply_projection(source, projection, self.id_field)
        self._expand(document, expansion.nested)
        return document
