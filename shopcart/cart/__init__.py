"""Cart package: models, storage, and the client-side store."""
from .models import LineItem, count_items, total_price
from .storage import DocumentStore, RedisDocumentStore, SupabaseDocumentStore, get_document_store
from .store import CartStore, create_cart_store

__all__ = [
    "LineItem",
    "count_items",
    "total_price",
    "DocumentStore",
    "SupabaseDocumentStore",
    "RedisDocumentStore",
    "get_document_store",
    "CartStore",
    "create_cart_store",
]
