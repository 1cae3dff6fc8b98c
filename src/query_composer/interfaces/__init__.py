"""
Interfaces Layer - Abstract Protocols for Dependencies.

This package defines the abstract interfaces (using typing.Protocol) for all
external collaborators. The composition engine and the pipeline depend on
these abstractions, not on concrete stores or loggers.

Protocols:
    - Collection: Document store abstraction (find + count)
    - AuditLogger: Audit trail of executed reads
    - MetricsCollector: Performance metrics abstraction
"""

from query_composer.interfaces.audit_logger import AuditLogger
from query_composer.interfaces.collection import Collection
from query_composer.interfaces.metrics_collector import MetricsCollector

__all__ = [
    "AuditLogger",
    "Collection",
    "MetricsCollector",
]
