"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from shopcart.errors import ERROR_INVALID_PRICE, ERROR_INVALID_QUANTITY
from shopcart.services.money import to_decimal, multiply, parse_money, to_float, total


@dataclass
class LineItem:
    """Single product entry in the cart."""
    product_id: str
    name: str
    unit_price: Decimal  # Snapshot taken when the product was added
    quantity: int = 1

    def __post_init__(self):
        self.unit_price = to_decimal(self.unit_price)

    @property
    def total_price(self) -> Decimal:
        """Exact price for all units."""
        return multiply(self.unit_price, self.quantity)

    def to_dict(self) -> dict:
        """Convert to the cart document shape (price as a JSON number)."""
        return {
            "id": self.product_id,
            "name": self.name,
            "price": to_float(self.unit_price),
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """Create from a cart document entry.

        Raises KeyError/ValueError on a malformed entry so the whole document is rejected.
        """
        quantity = data.get("quantity", 1)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(ERROR_INVALID_QUANTITY)
        try:
            unit_price = parse_money(data["price"])
        except ValueError:
            raise ValueError(ERROR_INVALID_PRICE) from None
        if unit_price < 0:
            raise ValueError(ERROR_INVALID_PRICE)
        return cls(
            product_id=str(data["id"]),
            name=data["name"],
            unit_price=unit_price,
            quantity=quantity,
        )


def count_items(items: Iterable[LineItem]) -> int:
    """Total number of units in the cart."""
    return sum(item.quantity for item in items)


def total_price(items: Iterable[LineItem]) -> Decimal:
    """Exact sum of unit_price * quantity over all lines."""
    return total(item.total_price for item in items)


def serialize_items(items: Iterable[LineItem]) -> list[dict]:
    return [item.to_dict() for item in items]


def deserialize_items(data: Iterable[dict]) -> list[LineItem]:
    return [LineItem.from_dict(entry) for entry in data]
