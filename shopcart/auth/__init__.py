"""Authentication package."""
from .identity import IdentityHandler, IdentityProvider, IdentityUser, SupabaseIdentityProvider

__all__ = [
    "IdentityHandler",
    "IdentityProvider",
    "IdentityUser",
    "SupabaseIdentityProvider",
]
