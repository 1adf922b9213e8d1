"""
Test suite for the artist assignment engine.

    # Run all tests
    python -m pytest tests/ -v

    # Using unittest
    python -m unittest discover tests -v

Service tests run against the in-memory repositories in tests/mocks.
Repository write paths that depend on Session flushing run against an
in-memory SQLite database, so no PostgreSQL server is needed.
"""
