"""
In-Memory Metrics Collector.

Keeps read timings and counts in memory, keyed by metric name and
tags, and summarizes them on request.
"""

from __future__ import annotations

from datetime import datetime
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple

_SeriesKey = Tuple[str, Tuple[Tuple[str, str], ...]]


class InMemoryMetricsCollector:
    """Simple in-memory metrics collector."""

    def __init__(self) -> None:
        self._series: Dict[_SeriesKey, List[Dict[str, Any]]] = {}
        self._lock = Lock()

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "timing", duration_seconds, tags)

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "count", value, tags)

    def record_gauge(
        self,
        name: str,
        value: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "gauge", value, tags)

    def get_metrics(self) -> Dict[str, Any]:
        """
        Summary per metric name, with a breakdown per tag set.

        Returns:
            {name: {"count", "total", "min", "max", "last", "by_tags": {...}}}
        """
        with self._lock:
            summary: Dict[str, Any] = {}
            for (name, tags), entries in self._series.items():
                values = [e["value"] for e in entries]
                metric = summary.setdefault(
                    name,
                    {"count": 0, "total": 0.0, "min": None, "max": None, "last": None, "by_tags": {}},
                )
                metric["count"] += len(values)
                metric["total"] += sum(values)
                metric["min"] = min(values) if metric["min"] is None else min(metric["min"], *values)
                metric["max"] = max(values) if metric["max"] is None else max(metric["max"], *values)
                metric["last"] = values[-1]
                if tags:
                    label = ",".join(f"{k}={v}" for k, v in tags)
                    metric["by_tags"][label] = {"count": len(values), "total": sum(values)}
            return summary

    def get_series(self, name: str) -> List[Dict[str, Any]]:
        """Raw entries recorded under a metric name, across all tag sets."""
        with self._lock:
            entries = [
                entry
                for (series_name, _), series in self._series.items()
                if series_name == name
                for entry in series
            ]
        return sorted(entries, key=lambda e: e["timestamp"])

    def clear(self) -> None:
        with self._lock:
            self._series.clear()

    def _record(
        self,
        name: str,
        metric_type: str,
        value: Any,
        tags: Optional[Dict[str, str]],
    ) -> None:
        key = (name, tuple(sorted((tags or {}).items())))
        with self._lock:
            self._series.setdefault(key, []).append(
                {
                    "type": metric_type,
                    "value": value,
                    "tags": dict(tags or {}),
                    "timestamp": datetime.now().isoformat(),
                }
            )
