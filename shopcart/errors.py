"""
Common Error Constants and Exceptions

Centralized error messages to avoid string duplication.
"""

# Cart errors
ERROR_CART_EMPTY_OR_UNAUTHENTICATED = "Cart is empty or user is not logged in"
ERROR_INVALID_PRODUCT_ID = "product_id must be a non-empty string"
ERROR_INVALID_PRICE = "unit_price must be a finite, non-negative number"
ERROR_INVALID_NAME = "name must be a non-empty string"
ERROR_INVALID_QUANTITY = "quantity must be a positive integer"

# Storage errors
ERROR_UNKNOWN_BACKEND = "Unknown cart storage backend"
ERROR_ORDER_NOT_CREATED = "Order was not created"


class CartError(Exception):
    """Base class for shopcart errors."""


class InvalidOperation(CartError):
    """Operation is not allowed in the current cart state."""
