"""
shopcart

Client-side shopping cart backed by a remote document store:
- cart: LineItem model, CartStore, storage backends
- auth: identity providers (Supabase auth)
- db: Supabase + Upstash Redis clients
- services: Order model, money helpers
"""

from shopcart.auth import IdentityProvider, IdentityUser
from shopcart.cart import CartStore, DocumentStore, LineItem, create_cart_store
from shopcart.errors import CartError, InvalidOperation
from shopcart.services import Order, OrderStatus

__all__ = [
    "CartStore",
    "create_cart_store",
    "LineItem",
    "DocumentStore",
    "IdentityProvider",
    "IdentityUser",
    "Order",
    "OrderStatus",
    "CartError",
    "InvalidOperation",
]
