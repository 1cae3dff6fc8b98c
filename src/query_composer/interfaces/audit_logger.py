"""
Audit Logger Protocol.

Defines the abstract interface for audit logging of executed reads:
which entity was queried, with what compiled query, and what came back.

Design Notes:
    - Correlation ID propagation for tracing one request
    - No side effects on query composition or results
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class AuditLogger(Protocol):
    """Abstract interface for audit logging."""

    def set_correlation_id(self, correlation_id: str) -> None:
        """Set correlation ID for subsequent log entries."""
        ...

    def log_query_start(
        self,
        entity: str,
        query: Dict[str, Any],
    ) -> None:
        """
        Log that a read is about to be executed.

        Args:
            entity: Entity name (e.g. "post")
            query: Plain description of the compiled query
        """
        ...

    def log_query_end(
        self,
        entity: str,
        returned_count: int,
        total: int,
        duration_seconds: float,
    ) -> None:
        """
        Log a completed read.

        Args:
            entity: Entity name
            returned_count: Documents on the returned page
            total: Documents matching the criteria
            duration_seconds: Wall time of find + count
        """
        ...

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log an anomaly, warning or failed read.

        Args:
            message: Description of the anomaly
            severity: INFO, WARNING, ERROR or CRITICAL
            context: Optional additional context
        """
        ...
