"""
Configuration Package - Models and Loaders.

Configuration Structure:
    - QueryConfig: Root configuration object
    - PaginationConfig: Default and maximum page size
    - ExecutionConfig: Parallel vs. sequential reads, lean documents
    - FilterBehaviorConfig: Operator strictness
    - PostFilterConfig: Post sort allow-list and author fields
    - ModerationFilterConfig: User/comment listing settings

Profiles under config/profiles/<name>.yaml are deep-merged over the
base file.
"""

from query_composer.config.loader import ConfigLoader, load_config
from query_composer.config.models import (
    ExecutionConfig,
    FilterBehaviorConfig,
    ModerationFilterConfig,
    PaginationConfig,
    PostFilterConfig,
    QueryConfig,
)

__all__ = [
    "ConfigLoader",
    "ExecutionConfig",
    "FilterBehaviorConfig",
    "ModerationFilterConfig",
    "PaginationConfig",
    "PostFilterConfig",
    "QueryConfig",
    "load_config",
]
