"""
Core Domain Entities.

Documents of the social feed that reads are composed against: users,
posts about an asset (crypto or stock) and comments. Field aliases are
the stored (camelCase) document keys, which are also the names request
parameters filter on.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class AssetType(str, Enum):
    """Kind of asset a post is about."""

    CRYPTO = "crypto"
    STOCK = "stock"


class Sentiment(str, Enum):
    """Author's market view expressed in a post."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class Visibility(str, Enum):
    """Who may see a post."""

    PUBLIC = "public"
    FOLLOWERS = "followers"
    PRIVATE = "private"


class UserRole(str, Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class _Document(BaseModel):
    """Base for stored documents."""

    id: str = Field(..., alias="_id", description="Document identifier")
    created_at: datetime = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True, "use_enum_values": True}

    def to_document(self) -> Dict[str, Any]:
        """Serialize with stored key names."""
        return self.model_dump(by_alias=True)


class UserProfile(_Document):
    """A registered user."""

    name: str
    email: str
    avatar: Optional[str] = None
    role: UserRole = UserRole.USER
    is_active: bool = Field(default=True, alias="isActive")
    password: str = Field(..., description="Password hash, never exposed in listings")


class AssetRef(BaseModel):
    """Asset embedded in a post."""

    symbol: str = Field(..., description="Ticker, stored upper-case")
    name: str
    type: AssetType

    model_config = {"use_enum_values": True}


class Post(_Document):
    """A user post about an asset."""

    user_id: str = Field(..., alias="userId")
    asset: AssetRef
    content: str = Field(..., max_length=5000)
    tags: List[str] = Field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
    likes_count: int = Field(default=0, ge=0, alias="likesCount")
    comments_count: int = Field(default=0, ge=0, alias="commentsCount")
    shares_count: int = Field(default=0, ge=0, alias="sharesCount")
    visibility: Visibility = Visibility.PUBLIC
    shared_post: Optional[str] = Field(default=None, alias="sharedPost")
    share_comment: Optional[str] = Field(default=None, alias="shareComment")
    is_hidden: bool = Field(default=False, alias="isHidden")


class Comment(_Document):
    """A comment on a post."""

    post_id: str = Field(..., alias="postId")
    user_id: str = Field(..., alias="userId")
    content: str = Field(..., max_length=2000)
    likes_count: int = Field(default=0, ge=0, alias="likesCount")
