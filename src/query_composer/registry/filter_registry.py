"""
Filter Registry - Entity Filter Management.

Thread-safe registry mapping entity names to the filter class that
parses their request parameters. The pipeline asks the registry for a
fresh filter per request.

Usage:
    registry = FilterRegistry(config)
    registry.register("post", PostFilter, "1.0.0")
    post_filter = registry.create("post", {"assetSymbol": "btc"})
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from query_composer.config.models import QueryConfig
from query_composer.filters.filter_builder import FilterBuilder
from query_composer.filters.moderation_filters import CommentFilter, UserFilter
from query_composer.filters.post_filter import PostFilter

logger = logging.getLogger(__name__)

FilterFactory = Callable[[Mapping[str, Any], QueryConfig], FilterBuilder]


class UnknownEntityError(KeyError):
    """Raised when no enabled filter is registered for an entity."""

    def __init__(self, entity: str) -> None:
        super().__init__(entity)
        self.entity = entity

    def __str__(self) -> str:
        return f"No enabled filter registered for entity '{self.entity}'"


@dataclass
class FilterInfo:
    """Metadata about a registered entity filter."""

    entity: str
    version: str
    enabled: bool
    factory: FilterFactory
    description: str = ""
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "entity": self.entity,
            "version": self.version,
            "enabled": self.enabled,
            "description": self.description,
            "tags": self.tags,
            "factory": getattr(self.factory, "__name__", type(self.factory).__name__),
        }


class FilterRegistry:
    """
    Thread-safe registry of entity filters.

    Supports:
        - Registration by class or by factory function
        - Enable/disable per entity
        - Version tracking per filter
    """

    def __init__(self, config: Optional[QueryConfig] = None) -> None:
        self.config = config or QueryConfig()
        self._filters: Dict[str, FilterInfo] = {}
        self._lock = RLock()

    def register(
        self,
        entity: str,
        filter_class: Type[FilterBuilder],
        version: str,
        description: str = "",
        tags: Optional[List[str]] = None,
    ) -> None:
        """
        Register a filter class for an entity.

        Args:
            entity: Entity name (e.g. "post")
            filter_class: FilterBuilder subclass taking (params, config)
            version: Version string for the filter
            description: Optional description
            tags: Optional tags for categorization

        Raises:
            ValueError: If the entity already has a filter
        """
        self.register_with_factory(
            entity, filter_class, version, description or (filter_class.__doc__ or "").strip(), tags
        )

    def register_with_factory(
        self,
        entity: str,
        factory: FilterFactory,
        version: str,
        description: str = "",
        tags: Optional[List[str]] = None,
    ) -> None:
        """Register a callable (params, config) -> FilterBuilder for an entity."""
        with self._lock:
            if entity in self._filters:
                raise ValueError(
                    f"Entity '{entity}' is already registered. Use unregister() first."
                )
            self._filters[entity] = FilterInfo(
                entity=entity,
                version=version,
                enabled=True,
                factory=factory,
                description=description,
                tags=tags or [],
            )
            logger.info(f"Registered filter for {entity} v{version}")

    def unregister(self, entity: str) -> bool:
        with self._lock:
            if entity not in self._filters:
                logger.warning(f"Cannot unregister: entity '{entity}' not found")
                return False
            del self._filters[entity]
            logger.info(f"Unregistered filter for {entity}")
            return True

    def create(self, entity: str, params: Optional[Mapping[str, Any]] = None) -> FilterBuilder:
        """
        Build a fresh filter for one request.

        Args:
            entity: Entity name
            params: Raw request parameters

        Returns:
            Filter with the parameters already applied

        Raises:
            UnknownEntityError: If the entity is unknown or disabled
        """
        with self._lock:
            info = self._filters.get(entity)
            if info is None or not info.enabled:
                raise UnknownEntityError(entity)
            factory = info.factory
        return factory(params or {}, self.config)

    def get_filter(self, entity: str) -> Optional[FilterInfo]:
        """Registration info for an entity, or None."""
        with self._lock:
            return self._filters.get(entity)

    def enable_filter(self, entity: str) -> bool:
        return self._set_enabled(entity, True)

    def disable_filter(self, entity: str) -> bool:
        return self._set_enabled(entity, False)

    def _set_enabled(self, entity: str, enabled: bool) -> bool:
        with self._lock:
            info = self._filters.get(entity)
            if info is None:
                return False
            info.enabled = enabled
            logger.info(f"{'Enabled' if enabled else 'Disabled'} filter for {entity}")
            return True

    def list_all(self) -> Dict[str, FilterInfo]:
        with self._lock:
            return dict(self._filters)

    def get_version(self, entity: str) -> Optional[str]:
        info = self.get_filter(entity)
        return info.version if info else None

    def get_versions(self) -> Dict[str, str]:
        with self._lock:
            return {entity: info.version for entity, info in self._filters.items()}

    @property
    def registered_count(self) -> int:
        with self._lock:
            return len(self._filters)

    def clear(self) -> None:
        with self._lock:
            self._filters.clear()
            logger.info("Cleared all filters from registry")


def create_default_registry(config: Optional[QueryConfig] = None) -> FilterRegistry:
    """Registry with the built-in post, user and comment filters."""
    registry = FilterRegistry(config)
    registry.register("post", PostFilter, "1.0.0", "Feed posts", tags=["feed"])
    registry.register("user", UserFilter, "1.0.0", "User moderation listing", tags=["moderation"])
    registry.register(
        "comment", CommentFilter, "1.0.0", "Comment moderation listing", tags=["moderation"]
    )
    return registry
