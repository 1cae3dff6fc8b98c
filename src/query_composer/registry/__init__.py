"""
Registry Package - Entity Filter Registry.

Maps entity names to the filter that parses their request parameters.
"""

from query_composer.registry.filter_registry import (
    FilterInfo,
    FilterRegistry,
    UnknownEntityError,
    create_default_registry,
)

__all__ = [
    "FilterInfo",
    "FilterRegistry",
    "UnknownEntityError",
    "create_default_registry",
]
