"""
Metrics Collector Protocol.

Defines the abstract interface for recording read performance:
timings of find/count, page sizes and match totals.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class MetricsCollector(Protocol):
    """Abstract interface for metrics collection."""

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a duration in seconds."""
        ...

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a counter increment."""
        ...

    def record_gauge(
        self,
        name: str,
        value: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a point-in-time value."""
        ...

    def get_metrics(self) -> Dict[str, Any]:
        """Summary of everything recorded so far."""
        ...
