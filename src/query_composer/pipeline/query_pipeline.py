"""
Query Pipeline - Request Parameters to Response Envelope.

Resolves the filter for an entity, executes it against the entity's
collection and records the audit trail and metrics of the read.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Dict, Mapping, Optional

from query_composer.config.models import QueryConfig
from query_composer.domain.value_objects import ResultEnvelope
from query_composer.filters.filter_builder import FilterBuilder
from query_composer.filters.post_filter import PostFilter
from query_composer.interfaces.audit_logger import AuditLogger
from query_composer.interfaces.collection import Collection
from query_composer.interfaces.metrics_collector import MetricsCollector
from query_composer.registry.filter_registry import FilterRegistry, UnknownEntityError

logger = logging.getLogger(__name__)


class QueryPipeline:
    """Main entry point for entity listings."""

    def __init__(
        self,
        collections: Mapping[str, Collection],
        registry: FilterRegistry,
        config: QueryConfig,
        audit_logger: AuditLogger,
        metrics_collector: MetricsCollector,
    ) -> None:
        """
        Initialize pipeline with all dependencies.

        Args:
            collections: Collection per entity name
            registry: Filters per entity name
            config: Query configuration
            audit_logger: For audit trail
            metrics_collector: For read timings and counts
        """
        self.collections = dict(collections)
        self.registry = registry
        self.config = config
        self.audit_logger = audit_logger
        self.metrics_collector = metrics_collector

    def run(
        self,
        entity: str,
        params: Optional[Mapping[str, Any]] = None,
        lean: Optional[bool] = None,
    ) -> ResultEnvelope:
        """
        List one page of an entity from raw request parameters.

        Args:
            entity: Registered entity name ("post", "user", "comment")
            params: Raw request parameters
            lean: Plain dicts when True; defaults to config.execution.lean

        Returns:
            ResultEnvelope with data and pagination

        Raises:
            UnknownEntityError: Entity without an enabled filter or collection
            Exception: Read failures from the collection, unmodified
        """
        query_filter = self.registry.create(entity, params)
        return self._execute(entity, query_filter, lean)

    def get_feed_posts(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        The post feed: {"posts": [...], "pagination": {...}}.

        Posts hidden by moderation are left out when
        post_filter.exclude_hidden is enabled.
        """
        post_filter = self.registry.create("post", params)
        if self.config.post_filter.exclude_hidden and isinstance(post_filter, PostFilter):
            post_filter.exclude_hidden()

        envelope = self._execute("post", post_filter, lean=True)
        wire = envelope.to_dict()
        return {"posts": wire["data"], "pagination": wire["pagination"]}

    def _execute(
        self,
        entity: str,
        query_filter: FilterBuilder,
        lean: Optional[bool],
    ) -> ResultEnvelope:
        collection = self.collections.get(entity)
        if collection is None:
            raise UnknownEntityError(entity)

        if lean is None:
            lean = self.config.execution.lean

        correlation_id = str(uuid.uuid4())
        self.audit_logger.set_correlation_id(correlation_id)
        self.audit_logger.log_query_start(entity, query_filter.summary())

        start_time = time.perf_counter()
        try:
            envelope = query_filter.execute(collection, lean=lean)
        except Exception as e:
            self.audit_logger.log_anomaly(
                f"Query on {entity} failed: {e}",
                severity="ERROR",
                context={"entity": entity, "error_type": type(e).__name__},
            )
            self.metrics_collector.record_count("query_errors_total", 1, {"entity": entity})
            raise

        duration = time.perf_counter() - start_time
        total = envelope.pagination.total

        self.audit_logger.log_query_end(entity, len(envelope.data), total, duration)
        self.metrics_collector.record_timing("query_seconds", duration, {"entity": entity})
        self.metrics_collector.record_count("documents_returned", len(envelope.data), {"entity": entity})
        self.metrics_collector.record_gauge("documents_matched", total, {"entity": entity})

        if total == 0:
            logger.debug(f"Query on {entity} matched no documents ({correlation_id})")

        return envelope
