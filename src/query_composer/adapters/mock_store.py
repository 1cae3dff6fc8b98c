"""
Mock Document Store.

A fake feed dataset for development and testing. Generates
deterministic users, posts (including reposts and hidden posts) and
comments, wired together as InMemoryCollections.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Dict, List

from query_composer.adapters.memory_collection import InMemoryCollection
from query_composer.domain.entities import (
    AssetRef,
    AssetType,
    Comment,
    Post,
    Sentiment,
    UserProfile,
    UserRole,
    Visibility,
)


class MockDocumentStore:
    """Seeded fake users, posts and comments."""

    MOCK_USERS = [
        ("Alice Chen", "alice@example.com", UserRole.ADMIN),
        ("Bob Martin", "bob@example.com", UserRole.MODERATOR),
        ("Carla Diaz", "carla@example.com", UserRole.USER),
        ("Dmitri Volkov", "dmitri@example.com", UserRole.USER),
        ("Emma Stone", "emma@example.com", UserRole.USER),
        ("Farid Haddad", "farid@example.com", UserRole.USER),
        # Deactivated account
        ("Greta Olsen", "greta@example.com", UserRole.USER),
    ]

    MOCK_ASSETS = [
        ("BTC", "Bitcoin", AssetType.CRYPTO),
        ("ETH", "Ethereum", AssetType.CRYPTO),
        ("SOL", "Solana", AssetType.CRYPTO),
        ("AAPL", "Apple Inc", AssetType.STOCK),
        ("TSLA", "Tesla Inc", AssetType.STOCK),
        ("NVDA", "NVIDIA Corporation", AssetType.STOCK),
    ]

    MOCK_TAGS = ["analysis", "news", "breakout", "earnings", "defi", "longterm", "scalping"]

    MOCK_PHRASES = [
        "Watching the weekly close on {symbol}.",
        "{name} looks strong after the latest news.",
        "Taking profits on {symbol} here, volume is fading.",
        "Long-term thesis on {name} unchanged.",
        "Support held again for {symbol}, adding to my position.",
    ]

    BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)

    def __init__(self, seed: int = 42, post_count: int = 40, comment_count: int = 30) -> None:
        """
        Initialize mock store with random seed.

        Args:
            seed: Random seed for reproducibility
            post_count: Number of posts to generate
            comment_count: Number of comments to generate
        """
        self._seed = seed
        self._rng = random.Random(seed)

        self.users = InMemoryCollection("users", self._generate_users())
        self.posts = InMemoryCollection("posts", self._generate_posts(post_count))
        self.comments = InMemoryCollection("comments", self._generate_comments(comment_count))

        self.posts.relate("userId", self.users).relate("sharedPost", self.posts)
        self.comments.relate("userId", self.users).relate("postId", self.posts)

    def collections(self) -> Dict[str, InMemoryCollection]:
        """Entity name -> collection, as expected by the query pipeline."""
        return {"user": self.users, "post": self.posts, "comment": self.comments}

    def _new_id(self) -> str:
        return f"{self._rng.getrandbits(96):024x}"

    def _generate_users(self) -> List[Dict]:
        users = []
        self._user_ids: List[str] = []
        for i, (name, email, role) in enumerate(self.MOCK_USERS):
            user_id = self._new_id()
            self._user_ids.append(user_id)
            users.append(
                UserProfile(
                    id=user_id,
                    created_at=self.BASE_TIME - timedelta(days=365 - i * 30),
                    name=name,
                    email=email,
                    avatar=f"https://cdn.example.com/avatars/{i}.png",
                    role=role,
                    is_active=name != "Greta Olsen",
                    password=f"hash${self._rng.getrandbits(64):016x}",
                ).to_document()
            )
        return users

    def _generate_posts(self, count: int) -> List[Dict]:
        posts: List[Dict] = []
        self._post_ids: List[str] = []
        for i in range(count):
            symbol, name, asset_type = self._rng.choice(self.MOCK_ASSETS)
            post_id = self._new_id()

            # Every 7th post reposts an earlier one
            shared_post = None
            share_comment = None
            if i >= 7 and i % 7 == 0:
                shared_post = self._rng.choice(self._post_ids)
                share_comment = "Worth a read"

            post = Post(
                id=post_id,
                created_at=self.BASE_TIME + timedelta(hours=i * 5),
                user_id=self._rng.choice(self._user_ids),
                asset=AssetRef(symbol=symbol, name=name, type=asset_type),
                content=self._rng.choice(self.MOCK_PHRASES).format(symbol=symbol, name=name),
                tags=self._rng.sample(self.MOCK_TAGS, k=self._rng.randint(0, 3)),
                sentiment=self._rng.choice(list(Sentiment)),
                likes_count=self._rng.randint(0, 12),
                comments_count=self._rng.randint(0, 8),
                shares_count=self._rng.randint(0, 5),
                visibility=self._rng.choices(
                    list(Visibility), weights=[0.7, 0.2, 0.1]
                )[0],
                shared_post=shared_post,
                share_comment=share_comment,
                # Moderation hid every 10th post
                is_hidden=i % 10 == 9,
            )
            self._post_ids.append(post_id)
            posts.append(post.to_document())
        return posts

    def _generate_comments(self, count: int) -> List[Dict]:
        comments = []
        for i in range(count):
            comments.append(
                Comment(
                    id=self._new_id(),
                    created_at=self.BASE_TIME + timedelta(hours=i * 3 + 1),
                    post_id=self._rng.choice(self._post_ids),
                    user_id=self._rng.choice(self._user_ids),
                    content=self._rng.choice(
                        ["Agreed!", "Not convinced, see the chart.", "Great analysis", "Source?"]
                    ),
                    likes_count=self._rng.randint(0, 5),
                ).to_document()
            )
        return comments
