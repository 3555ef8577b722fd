"""
Pytest configuration for integration tests.
"""

import pytest

from easy_orm.api.collection_endpoints import collections


@pytest.fixture(autouse=True)
def reset_collections():
    """Start every test with empty backend collections."""
    collections.clear()
    yield
    collections.clear()
