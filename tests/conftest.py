"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import Mock

# Set test environment variables
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from storefront.cart import CartItem, CartPersistence, CartStore
from storefront.db import MemoryStore


@pytest.fixture
def memory_store():
    """Empty in-memory key-value store"""
    return MemoryStore()


@pytest.fixture
def persistence(memory_store):
    """Persistence adapter over the memory store"""
    return CartPersistence(memory_store)


@pytest.fixture
def cart_store(persistence):
    """Cart store starting from an empty record"""
    return CartStore(persistence)


@pytest.fixture
def failing_store():
    """Key-value store whose every call raises"""
    store = Mock()
    store.get.side_effect = ConnectionError("storage unavailable")
    store.set.side_effect = OSError("quota exceeded")
    store.delete.side_effect = ConnectionError("storage unavailable")
    return store


@pytest.fixture
def mug():
    """Sample item"""
    return CartItem(id="A", name="Coffee Mug", price="10.00", extra={"image": "/img/mug.png"})


@pytest.fixture
def poster():
    """Sample item with awkward price"""
    return CartItem(id="B", name="Poster", price="19.99")


@pytest.fixture
def sticker():
    """Sample cheap item"""
    return CartItem(id="C", name="Sticker", price="0.02", extra={"variant": "glossy"})
