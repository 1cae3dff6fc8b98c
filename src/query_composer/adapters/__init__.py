"""
Adapters Package - Infrastructure Implementations.

Concrete implementations of the protocols in the interfaces package,
following the Ports & Adapters pattern.

Collections:
    - InMemoryCollection: Thread-safe document collection
    - MockDocumentStore: Seeded users/posts/comments for development

Loggers:
    - ConsoleAuditLogger: Simple console output

Metrics:
    - InMemoryMetricsCollector: Simple in-memory collection
"""

from query_composer.adapters.console_logger import ConsoleAuditLogger
from query_composer.adapters.memory_collection import DocumentHandle, InMemoryCollection
from query_composer.adapters.metrics_collector import InMemoryMetricsCollector
from query_composer.adapters.mock_store import MockDocumentStore

__all__ = [
    "ConsoleAuditLogger",
    "DocumentHandle",
    "InMemoryCollection",
    "InMemoryMetricsCollector",
    "MockDocumentStore",
]
