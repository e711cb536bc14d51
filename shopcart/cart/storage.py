"""Remote persistence for carts and orders.

Two backends are provided:
- Supabase: user_carts table (one row per user) + append-only orders table
- Upstash Redis: cart:{user_id} JSON keys + an orders stream
"""
import json
from datetime import UTC, datetime
from typing import Optional, Protocol

from supabase._async.client import AsyncClient
from upstash_redis.asyncio import Redis as AsyncRedis

from shopcart.db import CART_STORAGE_BACKEND, RedisKeys, Tables, get_redis
from shopcart.errors import ERROR_ORDER_NOT_CREATED, ERROR_UNKNOWN_BACKEND, CartError
from shopcart.services.models import Order


class DocumentStore(Protocol):
    """Per-user cart documents and append-only orders."""

    async def get_cart(self, user_id: str) -> Optional[list[dict]]:
        """Return the stored cart items, or None if the user has no cart document."""
        ...

    async def save_cart(self, user_id: str, items: list[dict]) -> None:
        """Overwrite the user's cart document."""
        ...

    async def create_order(self, order: Order) -> str:
        """Append a new order and return its id."""
        ...


class SupabaseDocumentStore:
    """Carts and orders in Supabase (PostgreSQL via PostgREST)."""

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    async def get_cart(self, user_id: str) -> Optional[list[dict]]:
        result = await self.client.table(Tables.USER_CARTS).select("cart_items").eq(
            "user_id", user_id
        ).limit(1).execute()
        if not result.data:
            return None
        return result.data[0].get("cart_items")

    async def save_cart(self, user_id: str, items: list[dict]) -> None:
        await self.client.table(Tables.USER_CARTS).upsert(
            {
                "user_id": user_id,
                "cart_items": items,
                "updated_at": datetime.now(UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()

    async def create_order(self, order: Order) -> str:
        # created_at comes from the column default (now())
        result = await self.client.table(Tables.ORDERS).insert(order.to_document()).execute()
        if not result.data:
            raise CartError(ERROR_ORDER_NOT_CREATED)
        return str(result.data[0]["id"])


class RedisDocumentStore:
    """Carts as JSON keys and orders as a stream in Upstash Redis."""

    def __init__(self, redis: AsyncRedis) -> None:
        self.redis = redis

    async def get_cart(self, user_id: str) -> Optional[list[dict]]:
        data = await self.redis.get(RedisKeys.cart_key(user_id))
        if not data:
            return None
        return json.loads(data).get("cart_items")

    async def save_cart(self, user_id: str, items: list[dict]) -> None:
        await self.redis.set(RedisKeys.cart_key(user_id), json.dumps({"cart_items": items}))

    async def create_order(self, order: Order) -> str:
        # Stream entry id ("<ms>-<seq>") is the server-assigned creation time
        entry_id = await self.redis.xadd(
            RedisKeys.ORDERS, "*", {"data": json.dumps(order.to_document())}
        )
        if not entry_id:
            raise CartError(ERROR_ORDER_NOT_CREATED)
        return str(entry_id)


def get_document_store(
    backend: Optional[str] = None,
    supabase_client: Optional[AsyncClient] = None,
) -> DocumentStore:
    """Build the configured DocumentStore (CART_STORAGE_BACKEND by default)."""
    backend = (backend or CART_STORAGE_BACKEND).lower()

    if backend == "supabase":
        if supabase_client is None:
            raise ValueError("supabase backend requires a Supabase client")
        return SupabaseDocumentStore(supabase_client)
    if backend == "redis":
        return RedisDocumentStore(get_redis())

    raise ValueError(f"{ERROR_UNKNOWN_BACKEND}: {backend}")
