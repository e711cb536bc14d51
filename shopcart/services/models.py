"""Database Models - Pydantic models for persisted entities."""
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from shopcart.services.money import to_decimal as _to_decimal, to_float


class OrderStatus:
    """Order status values written by the client."""

    PENDING = "Pending"  # Awaiting admin review


class Order(BaseModel):
    """Order created at checkout. Write-only: the client never reads it back."""

    model_config = ConfigDict(extra="ignore")

    user_id: str
    items: list[dict[str, Any]]
    total_price: Decimal
    item_count: int
    status: str = OrderStatus.PENDING

    @field_validator("total_price", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v)

    def to_document(self) -> dict[str, Any]:
        """Insert payload. The store assigns the id and creation timestamp."""
        return {
            "user_id": self.user_id,
            "items": self.items,
            "total_price": to_float(self.total_price),
            "item_count": self.item_count,
            "status": self.status,
        }
