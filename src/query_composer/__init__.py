"""
Query Composer - Filter Composition for Document Listings.

Turns flat request parameters into filtered, sorted, paginated reads
against a document collection and returns one page of results together
with pagination metadata.

Architecture:
    - Hexagonal Architecture (Ports & Adapters)
    - Dependency Injection for testability
    - Entity filters as FilterBuilder subclasses
    - Configuration-driven behavior via YAML

Main Components:
    - domain: Conditions, sort/pagination values, entities
    - interfaces: Collection, audit logger and metrics protocols
    - filters: FilterBuilder, PostFilter, moderation listings
    - registry: Entity name to filter mapping
    - pipeline: Orchestration with audit trail and metrics
    - adapters: In-memory collections, mock store, loggers
    - config: Configuration models and loaders

Example:
    >>> from query_composer import MockDocumentStore, PostFilter
    >>> store = MockDocumentStore(seed=42)
    >>> envelope = PostFilter({"assetSymbol": "btc", "limit": "5"}).execute(store.posts)
    >>> print(envelope.pagination.total)
"""

import logging

__version__ = "1.0.0"


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for Query Composer.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("query_composer").setLevel(level)


from query_composer.adapters import (  # noqa: E402
    ConsoleAuditLogger,
    InMemoryCollection,
    InMemoryMetricsCollector,
    MockDocumentStore,
)
from query_composer.config import QueryConfig, load_config  # noqa: E402
from query_composer.domain.criteria import Operator, UnsupportedOperatorError  # noqa: E402
from query_composer.domain.value_objects import ResultEnvelope  # noqa: E402
from query_composer.filters import (  # noqa: E402
    CommentFilter,
    FilterBuilder,
    PostFilter,
    UserFilter,
)
from query_composer.pipeline import QueryPipeline  # noqa: E402
from query_composer.registry import (  # noqa: E402
    FilterRegistry,
    UnknownEntityError,
    create_default_registry,
)

__all__ = [
    "CommentFilter",
    "ConsoleAuditLogger",
    "FilterBuilder",
    "FilterRegistry",
    "InMemoryCollection",
    "InMemoryMetricsCollector",
    "MockDocumentStore",
    "Operator",
    "PostFilter",
    "QueryConfig",
    "QueryPipeline",
    "ResultEnvelope",
    "UnknownEntityError",
    "UnsupportedOperatorError",
    "UserFilter",
    "configure_logging",
    "create_default_registry",
    "load_config",
]
