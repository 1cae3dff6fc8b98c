"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List

import pytest

from query_composer.adapters.console_logger import ConsoleAuditLogger
from query_composer.adapters.memory_collection import InMemoryCollection
from query_composer.adapters.metrics_collector import InMemoryMetricsCollector
from query_composer.adapters.mock_store import MockDocumentStore
from query_composer.config.models import ExecutionConfig, QueryConfig

BASE_TIME = datetime(2024, 3, 1, 12, 0, 0)

SYMBOLS = [("BTC", "crypto"), ("ETH", "crypto"), ("AAPL", "stock")]
SENTIMENTS = ["bullish", "bearish", "neutral"]


def build_users() -> List[Dict[str, Any]]:
    """Two authors and one admin."""
    return [
        {"_id": "u1", "name": "Alice Chen", "email": "alice@example.com",
         "avatar": "a.png", "role": "user", "isActive": True, "password": "h1",
         "createdAt": BASE_TIME - timedelta(days=30)},
        {"_id": "u2", "name": "Bob Martin", "email": "bob@example.com",
         "avatar": "b.png", "role": "user", "isActive": False, "password": "h2",
         "createdAt": BASE_TIME - timedelta(days=20)},
        {"_id": "u3", "name": "Carla Admin", "email": "carla@corp.example",
         "avatar": None, "role": "admin", "isActive": True, "password": "h3",
         "createdAt": BASE_TIME - timedelta(days=10)},
    ]


def build_posts(count: int = 25) -> List[Dict[str, Any]]:
    """
    Deterministic posts, one hour apart (p00 oldest).

    Symbols and sentiments cycle BTC/ETH/AAPL and bullish/bearish/neutral,
    authors alternate u1/u2, likesCount cycles 0..4, p24 is hidden and
    p20 reposts p03.
    """
    posts = []
    for i in range(count):
        symbol, asset_type = SYMBOLS[i % 3]
        posts.append(
            {
                "_id": f"p{i:02d}",
                "createdAt": BASE_TIME + timedelta(hours=i),
                "userId": "u1" if i % 2 == 0 else "u2",
                "asset": {"symbol": symbol, "name": symbol.title(), "type": asset_type},
                "content": f"Post {i} about {symbol}",
                "tags": [symbol.lower(), "daily"] if i % 4 == 0 else [symbol.lower()],
                "sentiment": SENTIMENTS[i % 3],
                "likesCount": i % 5,
                "commentsCount": 0,
                "sharesCount": 0,
                "visibility": "private" if i == 5 else "public",
                "sharedPost": "p03" if i == 20 else None,
                "isHidden": i == 24,
            }
        )
    return posts


def build_comments() -> List[Dict[str, Any]]:
    return [
        {"_id": "c1", "createdAt": BASE_TIME + timedelta(minutes=1), "postId": "p00",
         "userId": "u2", "content": "Great analysis", "likesCount": 1},
        {"_id": "c2", "createdAt": BASE_TIME + timedelta(minutes=2), "postId": "p00",
         "userId": "u3", "content": "Source?", "likesCount": 0},
        {"_id": "c3", "createdAt": BASE_TIME + timedelta(minutes=3), "postId": "p01",
         "userId": "u1", "content": "Not convinced, see the chart", "likesCount": 2},
    ]


@pytest.fixture(autouse=True)
def set_random_seed():
    """Ensure all tests are deterministic."""
    random.seed(42)
    yield


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_config_path(fixtures_dir: Path) -> Path:
    """Path to sample configuration file."""
    return fixtures_dir / "sample_config.yaml"


@pytest.fixture
def default_config() -> QueryConfig:
    return QueryConfig()


@pytest.fixture
def sequential_config() -> QueryConfig:
    """Config issuing find and count one after the other."""
    return QueryConfig(execution=ExecutionConfig(parallel_reads=False))


@pytest.fixture
def users() -> InMemoryCollection:
    return InMemoryCollection("users", build_users())


@pytest.fixture
def posts(users: InMemoryCollection) -> InMemoryCollection:
    """25 posts with author and repost relations."""
    collection = InMemoryCollection("posts", build_posts())
    collection.relate("userId", users).relate("sharedPost", collection)
    return collection


@pytest.fixture
def comments(users: InMemoryCollection, posts: InMemoryCollection) -> InMemoryCollection:
    collection = InMemoryCollection("comments", build_comments())
    collection.relate("userId", users).relate("postId", posts)
    return collection


@pytest.fixture
def collections(
    users: InMemoryCollection,
    posts: InMemoryCollection,
    comments: InMemoryCollection,
) -> Dict[str, InMemoryCollection]:
    return {"user": users, "post": posts, "comment": comments}


@pytest.fixture
def mock_store() -> MockDocumentStore:
    """Create mock document store for testing."""
    return MockDocumentStore(seed=42)


@pytest.fixture
def console_logger() -> ConsoleAuditLogger:
    """Create console logger for testing."""
    return ConsoleAuditLogger(verbose=False)


@pytest.fixture
def metrics_collector() -> InMemoryMetricsCollector:
    """Create metrics collector for testing."""
    return InMemoryMetricsCollector()
