"""
Money Utilities - Decimal operations for cart prices.

Prices are kept as exact Decimals; rounding to cents happens only where a
value is shown to the user.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Iterable, Union

# Display precision (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

Money = Union[str, int, float, Decimal]


def parse_money(value: Money) -> Decimal:
    """
    Strictly convert a price to a finite Decimal.

    Floats go through str so 9.99 stays 9.99 and not 9.9900000000000002131...

    Raises:
        ValueError: value is missing, a bool, unparseable, NaN or infinite
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float, Decimal)):
        raise ValueError(f"Not a money value: {value!r}")
    try:
        result = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except InvalidOperation:
        raise ValueError(f"Not a money value: {value!r}") from None
    if not result.is_finite():
        raise ValueError(f"Not a finite money value: {value!r}")
    return result


def to_decimal(value: Union[Money, None]) -> Decimal:
    """Lenient parse_money for trusted values: None or garbage becomes Decimal("0")."""
    try:
        return parse_money(value)
    except ValueError:
        return Decimal("0")


def round_money(value: Money) -> Decimal:
    """Round monetary value to cents for display."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def multiply(value: Money, factor: Money) -> Decimal:
    """Multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def total(values: Iterable[Money]) -> Decimal:
    """Exact sum of monetary values."""
    return sum((to_decimal(v) for v in values), Decimal("0"))


def to_float(value: Money) -> float:
    """
    Convert Decimal to float for JSON serialization or external APIs.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))
