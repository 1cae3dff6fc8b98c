"""
Pipeline Package - Query Orchestration.

    - QueryPipeline: resolves the entity filter, executes it, and records
      audit events and metrics
"""

from query_composer.pipeline.query_pipeline import QueryPipeline

__all__ = ["QueryPipeline"]
