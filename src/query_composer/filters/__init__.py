"""
Filters Package - Query Composition.

Filters:
    - FilterBuilder: Generic chainable composition engine
    - PostFilter: Feed parameters (asset, author, tag, sentiment, search, sort)
    - UserFilter: Moderation listing of users
    - CommentFilter: Moderation listing of comments

Design Principles:
    - One filter instance per request
    - Entity filters own their parameter allow-lists
    - Lenient parsing: blank values skipped, bad sort keys ignored,
      pagination clamped
"""

from query_composer.filters.filter_builder import FilterBuilder
from query_composer.filters.moderation_filters import CommentFilter, UserFilter
from query_composer.filters.post_filter import PostFilter

__all__ = [
    "CommentFilter",
    "FilterBuilder",
    "PostFilter",
    "UserFilter",
]
