"""
Integration Tests - End-to-End Pipeline Tests.

These tests verify that registry, filters, collections and the
pipeline work together. They use the MockDocumentStore and small
hand-built collections instead of a real document store.

Test Files:
    - test_query_pipeline.py: Full listing workflow
"""
