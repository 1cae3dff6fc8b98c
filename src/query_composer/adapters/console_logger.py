"""
Console Audit Logger.

A simple audit logger that prints executed reads to the console.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Optional


class ConsoleAuditLogger:
    """Simple console-based audit logger."""

    def __init__(self, verbose: bool = True) -> None:
        """
        Initialize console logger.

        Args:
            verbose: If True, also print the compiled query of each read.
        """
        self._verbose = verbose
        self._correlation_id: Optional[str] = None

    def set_correlation_id(self, correlation_id: str) -> None:
        self._correlation_id = correlation_id

    def log_query_start(self, entity: str, query: Dict[str, Any]) -> None:
        if self._verbose:
            self._log("INFO", f"Querying {entity}: {json.dumps(query, default=str)}")

    def log_query_end(
        self,
        entity: str,
        returned_count: int,
        total: int,
        duration_seconds: float,
    ) -> None:
        self._log(
            "INFO",
            f"Completed {entity} query: {returned_count} of {total} documents "
            f"({duration_seconds:.3f}s)",
        )

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        suffix = f" {context}" if context else ""
        self._log(severity, f"ANOMALY: {message}{suffix}")

    def _log(self, level: str, message: str) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        corr_id = self._correlation_id[:8] if self._correlation_id else "--------"
        print(f"[{timestamp}] [{corr_id}] [{level:5}] {message}")
