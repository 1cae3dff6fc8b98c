"""
Query Criteria Model.

Defines the closed set of building blocks a read is composed from:
conditions, logical groups, sort directions, projections and relation
expansions. Everything here is immutable once constructed.

Design Notes:
    - Operators are a closed enum; unknown names are rejected (or degraded
      to equality when leniency is requested explicitly)
    - Logical groups live under the "$and" / "$or" top-level keys
    - Expansions are recursive (relation-of-relation)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class UnsupportedOperatorError(ValueError):
    """Raised when a condition names an operator outside the closed set."""

    def __init__(self, operator: Any) -> None:
        supported = ", ".join(op.value for op in Operator)
        super().__init__(f"Unsupported operator {operator!r}. Supported: {supported}")
        self.operator = operator


class Operator(str, Enum):
    """Comparison operators understood by every collection."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    NIN = "nin"
    REGEX = "regex"
    EXISTS = "exists"

    @classmethod
    def parse(cls, value: Union[str, "Operator"], strict: bool = True) -> "Operator":
        """
        Resolve an operator name.

        Args:
            value: Operator or its string name (case-insensitive)
            strict: Raise on unknown names instead of falling back to EQ

        Returns:
            The matching Operator

        Raises:
            UnsupportedOperatorError: If the name is unknown and strict is set
        """
        if isinstance(value, Operator):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            if strict:
                raise UnsupportedOperatorError(value) from None
            logger.warning(f"Unknown operator {value!r}, falling back to equality")
            return cls.EQ


class LogicalOperator(str, Enum):
    """Logical group kinds, valued by their top-level criteria key."""

    AND = "$and"
    OR = "$or"


class SortDirection(int, Enum):
    """Sort direction in document-store convention."""

    ASC = 1
    DESC = -1

    @classmethod
    def parse(cls, value: Any) -> "SortDirection":
        """Anything not explicitly ascending sorts descending."""
        if isinstance(value, SortDirection):
            return value
        if isinstance(value, str) and value.strip().lower() in ("asc", "ascending"):
            return cls.ASC
        if isinstance(value, int) and not isinstance(value, bool) and value == 1:
            return cls.ASC
        return cls.DESC


def compile_pattern(value: Any) -> "re.Pattern[str]":
    """
    Compile a case-insensitive matcher.

    Input that is not a valid regular expression is matched literally.
    """
    if isinstance(value, re.Pattern):
        return re.compile(value.pattern, value.flags | re.IGNORECASE)
    text = str(value)
    try:
        return re.compile(text, re.IGNORECASE)
    except re.error:
        logger.debug(f"Pattern {text!r} is not a valid regex, matching literally")
        return re.compile(re.escape(text), re.IGNORECASE)


@dataclass(frozen=True)
class Condition:
    """A single compiled comparison against one field."""

    operator: Operator
    operand: Any

    @classmethod
    def compile(
        cls,
        value: Any,
        operator: Union[str, Operator] = Operator.EQ,
        strict: bool = True,
    ) -> "Condition":
        """Normalize the operand into the shape its operator expects."""
        op = Operator.parse(operator, strict=strict)
        if op in (Operator.IN, Operator.NIN):
            if isinstance(value, (list, tuple, set, frozenset)):
                operand: Any = tuple(value)
            else:
                operand = (value,)
        elif op is Operator.REGEX:
            operand = compile_pattern(value)
        elif op is Operator.EXISTS:
            operand = bool(value)
        else:
            operand = value
        return cls(operator=op, operand=operand)


@dataclass(frozen=True)
class LogicalGroup:
    """An AND/OR group of sub-criteria."""

    operator: LogicalOperator
    members: Tuple[Mapping[str, "Criterion"], ...] = ()


Criterion = Union[Condition, LogicalGroup]
Criteria = Mapping[str, Criterion]


def normalize_criteria(raw: Mapping[str, Any], strict: bool = True) -> Dict[str, Criterion]:
    """
    Turn a loosely-typed criteria mapping into compiled criteria.

    Literal values become equality conditions, compiled patterns become
    regex conditions and "$and"/"$or" keys become nested groups.
    """
    result: Dict[str, Criterion] = {}
    for key, value in raw.items():
        if key in (LogicalOperator.AND.value, LogicalOperator.OR.value):
            result[key] = LogicalGroup(
                operator=LogicalOperator(key),
                members=tuple(normalize_criteria(m, strict) for m in value),
            )
        elif isinstance(value, (Condition, LogicalGroup)):
            result[key] = value
        elif isinstance(value, re.Pattern):
            result[key] = Condition.compile(value, Operator.REGEX)
        else:
            result[key] = Condition(operator=Operator.EQ, operand=value)
    return result


def split_fields(fields: Union[str, Iterable[str], None]) -> Tuple[str, ...]:
    """Split "a b,c" or ["a", "b"] into a tuple of field names."""
    if fields is None:
        return ()
    if isinstance(fields, str):
        parts = re.split(r"[\s,]+", fields)
    else:
        parts = [str(f) for f in fields]
    return tuple(p.strip() for p in parts if p and p.strip())


@dataclass(frozen=True)
class Projection:
    """
    Fields to include (or, with a "-" prefix, to exclude) in output.

    Both may be given at once: exclusions are removed after the
    inclusions are applied.
    """

    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, fields: Union[str, Iterable[str], None]) -> Optional["Projection"]:
        names = split_fields(fields)
        if not names:
            return None
        include = tuple(n for n in names if not n.startswith("-"))
        exclude = tuple(n[1:] for n in names if n.startswith("-") and len(n) > 1)
        return cls(include=include, exclude=exclude)

    @property
    def is_empty(self) -> bool:
        return not self.include and not self.exclude


@dataclass(frozen=True)
class Expansion:
    """Relation-expansion directive, optionally expanding the expanded document."""

    path: str
    select: Tuple[str, ...] = ()
    nested: Tuple["Expansion", ...] = field(default_factory=tuple)

    @classmethod
    def of(
        cls,
        path: Union[str, "Expansion", Mapping[str, Any]],
        select: Union[str, Iterable[str], None] = None,
        nested: Optional[Iterable[Any]] = None,
    ) -> "Expansion":
        """
        Build an expansion from a path, an Expansion or a mapping.

        Mapping form: {"path": ..., "select": ..., "nested": [...]}, where
        "nested" may also be a single mapping.
        """
        if isinstance(path, Expansion):
            return path
        if isinstance(path, Mapping):
            inner = path.get("nested")
            if isinstance(inner, (Mapping, Expansion)):
                inner = [inner]
            return cls.of(str(path["path"]), path.get("select"), inner)
        children = tuple(cls.of(n) for n in (nested or ()))
        return cls(path=path, select=split_fields(select), nested=children)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"path": self.path}
        if self.select:
            data["select"] = " ".join(self.select)
        if self.nested:
            data["nested"] = [n.to_dict() for n in self.nested]
        return data
