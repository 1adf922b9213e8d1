"""
Pytest configuration and fixtures.

This file provides pytest-specific fixtures.
For standard test utilities, see tests/__init__.py
"""

from datetime import datetime, timezone

import pytest


@pytest.fixture
def fixed_now():
    """A Monday morning, 10:00 UTC."""
    return datetime(2024, 3, 4, 10, 0, tzinfo=timezone.utc)
