"""
Database Module - Supabase and Redis Clients

Provides singleton instances of:
- Async Supabase client (auth + cart/order tables)
- Async Upstash Redis client (alternative cart/order storage)

Singletons are only used by the composition root (create_cart_store);
CartStore itself receives its collaborators through the constructor.
"""

import os
from typing import Optional

from supabase._async.client import AsyncClient, create_client as acreate_client
from upstash_redis.asyncio import Redis as AsyncRedis


# Environment variables
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_KEY = os.environ.get("SUPABASE_KEY", "")

UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# supabase | redis
CART_STORAGE_BACKEND = os.environ.get("CART_STORAGE_BACKEND", "supabase").lower()


_async_supabase_client: Optional[AsyncClient] = None
_redis_client: Optional[AsyncRedis] = None


async def get_supabase() -> AsyncClient:
    """
    Get async Supabase client (singleton).
    Used for auth state and, by default, cart/order storage.
    """
    global _async_supabase_client

    if _async_supabase_client is None:
        if not SUPABASE_URL or not SUPABASE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
        _async_supabase_client = await acreate_client(SUPABASE_URL, SUPABASE_KEY)

    return _async_supabase_client


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not UPSTASH_REDIS_REST_URL or not UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class Tables:
    """Supabase table names."""

    USER_CARTS = "user_carts"  # one row per user, cart_items jsonb
    ORDERS = "orders"  # append-only


class RedisKeys:
    """Redis key prefixes for different data types."""

    CART = "cart:"  # cart:{user_id}
    ORDERS = "orders"  # stream, one entry per order

    @staticmethod
    def cart_key(user_id: str) -> str:
        return f"{RedisKeys.CART}{user_id}"
