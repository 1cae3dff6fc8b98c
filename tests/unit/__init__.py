"""
Unit Tests - Testing Individual Components in Isolation.

Each component is tested in isolation with mocked or in-memory
dependencies. Unit tests should be fast, deterministic, and focused.

Test Files:
    - test_criteria.py: Operators, conditions, projections, expansions
    - test_filter_builder.py: Generic composition and execution
    - test_post_filter.py: Feed parameter mapping
    - test_moderation_filters.py: User and comment listings
    - test_memory_collection.py: Matching, sorting, projection, expansion
    - test_config_loader.py: Configuration loading/validation
"""
