"""
Fixtures partagées: store en mémoire (aucun service externe requis)
"""

import pytest

from services.repository import InMemoryRepository


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def tiny_repo():
    """Store with a quota small enough to overflow in a few writes"""
    return InMemoryRepository(quota_bytes=2048)
