"""
Request Parameter Parser - Lenient Coercion of Flat Query Parameters.

Request parameters arrive untyped (strings, repeated keys as lists,
numbers from JSON bodies). Filters never reject caller input: blank
values mean "no opinion", unparseable numbers fall back to defaults.

Design Notes:
    - Repeated parameters: the first value wins
    - Integers are parsed from a leading run of digits ("12abc" -> 12),
      saturating at INT_CEILING
    - Booleans accept the usual spellings, anything else is absent
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?)0*(\d+)")

# Digit runs longer than this read as "very large" instead of being converted
_MAX_DIGITS = 18
INT_CEILING = 10 ** _MAX_DIGITS

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "no", "n", "off"}


def is_blank(value: Any) -> bool:
    """True for None and empty (or whitespace-only) strings."""
    return value is None or (isinstance(value, str) and not value.strip())


def get_param(params: Mapping[str, Any], name: str) -> Any:
    """
    Read one parameter.

    Args:
        params: Raw request parameters
        name: Parameter name

    Returns:
        Stripped string (or the raw non-string value), None when blank
    """
    value = params.get(name)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if isinstance(value, str):
        value = value.strip()
    return None if is_blank(value) else value


def coerce_int(value: Any) -> Optional[int]:
    """
    Parse an integer the way query strings are usually read; None if impossible.

    Values beyond +/-INT_CEILING (infinity, overlong digit runs) come back
    as +/-INT_CEILING so callers can clamp them like any other number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value:
            return None
        if value in (float("inf"), float("-inf")):
            return INT_CEILING if value > 0 else -INT_CEILING
        return int(value)
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    sign, digits = match.groups()
    if len(digits) > _MAX_DIGITS:
        number = INT_CEILING
    else:
        number = int(digits)
    return -number if sign == "-" else number


def coerce_bool(value: Any) -> Optional[bool]:
    """Parse a boolean flag; None when the value is not a recognizable flag."""
    if isinstance(value, bool):
        return value
    if is_blank(value):
        return None
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def unknown_params(params: Mapping[str, Any], known: Iterable[str]) -> List[str]:
    """Names of supplied parameters a filter does not understand."""
    known_set = set(known)
    return sorted(name for name in params if name not in known_set)


def log_ignored_params(
    params: Mapping[str, Any],
    known: Iterable[str],
    entity: str,
) -> None:
    """Debug-log parameters that will be ignored."""
    ignored = unknown_params(params, known)
    if ignored:
        logger.debug(f"{entity} filter ignoring unknown parameters: {ignored}")
