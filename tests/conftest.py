"""Pytest configuration and fixtures"""
import asyncio
import copy
import os
from datetime import UTC, datetime
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, Mock

import pytest

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test_key")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")

from shopcart.auth import IdentityUser
from shopcart.cart import CartStore
from shopcart.services.models import Order


class InMemoryIdentityProvider:
    """Identity provider driven by the test."""

    def __init__(self):
        self._handlers = []

    def on_identity_change(self, handler):
        self._handlers.append(handler)

        def unsubscribe():
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def sign_in(self, user_id: str, email: Optional[str] = None):
        for handler in list(self._handlers):
            handler(IdentityUser(id=user_id, email=email))

    def sign_out(self):
        for handler in list(self._handlers):
            handler(None)


class InMemoryDocumentStore:
    """Document store kept in dicts, with switches for failures and slow fetches."""

    def __init__(self):
        self.carts: Dict[str, List[dict]] = {}
        self.orders: List[dict] = []
        self.save_calls: List[tuple] = []
        self.get_gates: Dict[str, asyncio.Event] = {}
        self.fail_get = False
        self.fail_save = False
        self.fail_order = False

    async def get_cart(self, user_id):
        gate = self.get_gates.get(user_id)
        if gate is not None:
            await gate.wait()
        if self.fail_get:
            raise ConnectionError("document store unavailable")
        items = self.carts.get(user_id)
        return copy.deepcopy(items) if items is not None else None

    async def save_cart(self, user_id, items):
        await asyncio.sleep(0)
        if self.fail_save:
            raise ConnectionError("document store unavailable")
        self.save_calls.append((user_id, copy.deepcopy(items)))
        self.carts[user_id] = copy.deepcopy(items)

    async def create_order(self, order: Order) -> str:
        await asyncio.sleep(0)
        if self.fail_order:
            raise ConnectionError("document store unavailable")
        order_id = f"order-{len(self.orders) + 1}"
        document = order.to_document()
        document["id"] = order_id
        document["created_at"] = datetime.now(UTC)
        self.orders.append(document)
        return order_id


@pytest.fixture
def identity():
    return InMemoryIdentityProvider()


@pytest.fixture
def documents():
    return InMemoryDocumentStore()


@pytest.fixture
def store(identity, documents):
    cart_store = CartStore(identity, documents)
    yield cart_store
    cart_store.dispose()


@pytest.fixture
def sample_cart_items():
    """Cart document as stored remotely"""
    return [
        {"id": "prod-1", "name": "Widget", "price": 9.99, "quantity": 2},
        {"id": "prod-2", "name": "Gadget", "price": 25.0, "quantity": 1},
    ]


@pytest.fixture
def mock_supabase_client():
    """Mock async Supabase client"""
    client = Mock()

    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.insert.return_value = table_mock
    table_mock.upsert.return_value = table_mock
    table_mock.eq.return_value = table_mock
    table_mock.limit.return_value = table_mock
    table_mock.execute = AsyncMock(return_value=Mock(data=[]))

    client.table.return_value = table_mock

    return client


@pytest.fixture
def mock_redis():
    """Mock async Upstash Redis client"""
    redis = AsyncMock()
    redis.get.return_value = None
    redis.set.return_value = "OK"
    redis.xadd.return_value = "1735689600000-0"
    return redis
