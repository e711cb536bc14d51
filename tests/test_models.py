"""Tests for Order model, money helpers and logging helpers"""
import logging
from decimal import Decimal

import pytest

from shopcart.logging import PACKAGE_LOGGER, get_logger, sanitize_id_for_logging
from shopcart.services.models import Order, OrderStatus
from shopcart.services.money import parse_money, round_money, to_decimal, to_float, total


def test_order_defaults_to_pending():
    order = Order(user_id="user-1", items=[], total_price=0, item_count=0)

    assert order.status == OrderStatus.PENDING == "Pending"


def test_order_has_no_server_assigned_fields():
    assert "id" not in Order.model_fields
    assert "created_at" not in Order.model_fields


def test_order_total_is_decimal():
    order = Order(user_id="user-1", items=[], total_price=19.99, item_count=1)

    assert order.total_price == Decimal("19.99")


def test_order_document_shape():
    order = Order(
        id="ignored",
        user_id="user-1",
        items=[{"id": "prod-1", "name": "Widget", "price": 9.99, "quantity": 1}],
        total_price=Decimal("9.99"),
        item_count=1,
    )

    assert order.to_document() == {
        "user_id": "user-1",
        "items": [{"id": "prod-1", "name": "Widget", "price": 9.99, "quantity": 1}],
        "total_price": 9.99,
        "item_count": 1,
        "status": "Pending",
    }


def test_order_document_total_is_not_rounded():
    order = Order(user_id="user-1", items=[], total_price=Decimal("0.008"), item_count=2)

    assert order.to_document()["total_price"] == 0.008


def test_order_ignores_unknown_fields():
    order = Order(user_id="user-1", items=[], total_price="5", item_count=1, admin_note="x")

    assert not hasattr(order, "admin_note")


@pytest.mark.parametrize(
    "value, expected",
    [
        (9.99, Decimal("9.99")),
        ("12.50", Decimal("12.50")),
        (3, Decimal("3")),
        (Decimal("0.004"), Decimal("0.004")),
    ],
)
def test_parse_money(value, expected):
    assert parse_money(value) == expected


@pytest.mark.parametrize("value", [None, True, "abc", "", [], float("inf"), float("nan"), "Infinity", Decimal("NaN")])
def test_parse_money_rejects(value):
    with pytest.raises(ValueError):
        parse_money(value)


@pytest.mark.parametrize(
    "value, expected",
    [
        (9.99, Decimal("9.99")),
        ("12.50", Decimal("12.50")),
        (3, Decimal("3")),
        (None, Decimal("0")),
        ("abc", Decimal("0")),
        (float("nan"), Decimal("0")),
    ],
)
def test_to_decimal(value, expected):
    assert to_decimal(value) == expected


def test_round_money_half_up():
    assert round_money("2.675") == Decimal("2.68")


def test_total_is_exact():
    assert total([0.1, 0.2]) == Decimal("0.3")
    assert total([0.004, 0.004]) == Decimal("0.008")
    assert to_float(Decimal("0.30")) == 0.3


def test_sanitize_id_for_logging():
    assert sanitize_id_for_logging(None) == "N/A"
    assert sanitize_id_for_logging("") == "N/A"
    assert sanitize_id_for_logging("user-1") == "user-1"
    assert sanitize_id_for_logging("0123456789abcdef") == "01234567"
    assert sanitize_id_for_logging("ab\ncd") == "ab\\ncd"


def test_get_logger_is_cached():
    assert get_logger("shopcart.test") is get_logger("shopcart.test")


def test_module_loggers_sit_under_package_logger():
    logger = get_logger("shopcart.checkout")

    assert logger.parent is logging.getLogger(PACKAGE_LOGGER)
