"""
Observability Manager - Structured Query Events and Metrics.

Provides:
    - Structured JSON logging via structlog
    - Correlation ID propagation through contextvars
    - In-memory event and metric records for inspection

Satisfies both the AuditLogger and MetricsCollector protocols, so one
instance can be handed to the QueryPipeline for both roles.
"""

from __future__ import annotations

import logging
import threading
import uuid
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Get current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID in context."""
    _correlation_id.set(correlation_id)


class ObservabilityManager:
    """Structured logging with correlation IDs, plus metrics recording."""

    def __init__(
        self,
        service_name: str = "query_composer",
        use_json: bool = True,
        log_level: int = logging.INFO,
    ) -> None:
        """
        Initialize observability manager.

        Args:
            service_name: Logger name for emitted events
            use_json: JSON rendering when True, console rendering otherwise
            log_level: Minimum level that gets rendered
        """
        self.service_name = service_name
        self.use_json = use_json
        self.log_level = log_level
        self._metrics: Dict[str, List[Dict[str, Any]]] = {}
        self._events: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

        self._configure_structlog()
        self._logger = structlog.get_logger(service_name)

    def _configure_structlog(self) -> None:
        processors: List[Any] = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]

        if self.use_json:
            processors.append(structlog.processors.JSONRenderer(default=str))
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(self.log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=False,
        )

    def set_correlation_id(self, correlation_id: str) -> None:
        set_correlation_id(correlation_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

    def generate_correlation_id(self) -> str:
        correlation_id = str(uuid.uuid4())
        self.set_correlation_id(correlation_id)
        return correlation_id

    def log_event(
        self,
        event_type: str,
        data: Optional[Dict[str, Any]] = None,
        level: str = "info",
    ) -> None:
        """
        Record and emit a structured event.

        Args:
            event_type: Event name (e.g. "query_start")
            data: Additional event fields
            level: debug, info, warning, error or critical
        """
        event_data = {
            "timestamp": datetime.now().isoformat(),
            "correlation_id": get_correlation_id(),
            **(data or {}),
        }

        with self._lock:
            self._events.append({"event_type": event_type, **event_data})

        # correlation_id is merged from contextvars by structlog
        fields = {k: v for k, v in event_data.items() if k not in ("timestamp", "correlation_id")}
        log_method = getattr(self._logger, level.lower(), self._logger.info)
        log_method(event_type, **fields)

    def record_metric(
        self,
        name: str,
        value: float,
        tags: Optional[Dict[str, str]] = None,
        metric_type: str = "gauge",
    ) -> None:
        entry = {
            "timestamp": datetime.now().isoformat(),
            "value": value,
            "tags": tags or {},
            "type": metric_type,
            "correlation_id": get_correlation_id(),
        }

        with self._lock:
            self._metrics.setdefault(name, []).append(entry)

    def get_trace_context(self) -> Dict[str, Any]:
        return {
            "correlation_id": get_correlation_id(),
            "service_name": self.service_name,
            "timestamp": datetime.now().isoformat(),
        }

    def get_metrics(self) -> Dict[str, List[Dict[str, Any]]]:
        with self._lock:
            return {name: list(entries) for name, entries in self._metrics.items()}

    def get_events(self, event_type: Optional[str] = None) -> List[Dict[str, Any]]:
        """Recorded events, optionally only those of one type."""
        with self._lock:
            events = list(self._events)
        if event_type is None:
            return events
        return [e for e in events if e["event_type"] == event_type]

    def clear(self) -> None:
        with self._lock:
            self._metrics.clear()
            self._events.clear()

    # =========================================================================
    # AuditLogger Protocol Compatibility
    # =========================================================================

    def log_query_start(self, entity: str, query: Dict[str, Any]) -> None:
        self.log_event("query_start", {"entity": entity, "query": query}, level="debug")

    def log_query_end(
        self,
        entity: str,
        returned_count: int,
        total: int,
        duration_seconds: float,
    ) -> None:
        self.log_event(
            "query_end",
            {
                "entity": entity,
                "returned_count": returned_count,
                "total": total,
                "duration_seconds": duration_seconds,
            },
        )

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        level = "warning" if severity.upper() in ("INFO", "WARNING") else "error"
        self.log_event(
            "anomaly",
            {"message": message, "severity": severity, **(context or {})},
            level=level,
        )

    # =========================================================================
    # MetricsCollector Protocol Compatibility
    # =========================================================================

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self.record_metric(name, duration_seconds, tags, metric_type="histogram")

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self.record_metric(name, float(value), tags, metric_type="counter")

    def record_gauge(
        self,
        name: str,
        value: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self.record_metric(name, value, tags, metric_type="gauge")
