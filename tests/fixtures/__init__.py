"""
Test Fixtures - Shared Test Data and Configurations.

This package contains reusable test fixtures:
    - sample_config.yaml: Sample configuration for testing
    - config/profiles/lenient.yaml: Profile overlay for loader tests
"""
