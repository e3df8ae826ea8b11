# tests/conftest.py

from datetime import datetime
from decimal import Decimal

import pytest

from pos_engine.core.log import configure_logging
from pos_engine.schemas.cart import DiscountKind, DiscountRule, LineItem
from pos_engine.schemas.order import Order, OrderItem
from pos_engine.schemas.refund import Refund


configure_logging("DEBUG")


# ---------- Builders ----------
def make_order(
    order_id=1,
    total="225.00",
    payment_type="CASH",
    created_at=datetime(2025, 8, 8, 10, 0),
    cashier_id=1,
    branch_id=1,
    items=None,
):
    if items is None:
        items = [
            OrderItem(id=11, product_id=101, name="Polo T-Shirt", unit_price=Decimal("100.00"), quantity=2),
            OrderItem(id=12, product_id=102, name="Socks", unit_price=Decimal("50.00"), quantity=1),
        ]

    return Order(
        id=order_id,
        branch_id=branch_id,
        cashier_id=cashier_id,
        items=items,
        payment_type=payment_type,
        total_amount=Decimal(total) if total is not None else None,
        created_at=created_at,
    )


def make_refund(refund_id=1, order_id=1, amount="50.00", created_at=datetime(2025, 8, 8, 12, 0), **kwargs):
    return Refund(
        id=refund_id,
        order_id=order_id,
        reason=kwargs.pop("reason", "Defective item"),
        amount=Decimal(amount) if amount is not None else None,
        payment_type=kwargs.pop("payment_type", "CASH"),
        cashier_id=kwargs.pop("cashier_id", 1),
        branch_id=kwargs.pop("branch_id", 1),
        created_at=created_at,
        **kwargs,
    )


# ---------- Fixtures ----------
@pytest.fixture
def cart_items():
    return [
        LineItem(product_id=101, name="Polo T-Shirt", unit_price=Decimal("100"), quantity=2),
        LineItem(product_id=102, name="Socks", unit_price=Decimal("50"), quantity=1),
    ]


@pytest.fixture
def ten_percent():
    return DiscountRule(kind=DiscountKind.PERCENTAGE, value=Decimal("10"))


@pytest.fixture
def order():
    return make_order()
