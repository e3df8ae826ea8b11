from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from pos_engine.core.exceptions import EmptyCart, InvalidLineItem, UnknownPaymentType
from pos_engine.schemas.cart import Cart, DiscountKind, DiscountRule, LineItem
from pos_engine.schemas.order import OrderStatus
from pos_engine.services import pricing
from pos_engine.services.orders import materialize, materialize_cart


def test_materialized_total_matches_pricing(cart_items, ten_percent):
    order = materialize(cart_items, ten_percent, "CASH", branch_id=1, cashier_id=7, customer_id=3)

    assert order.total_amount == pricing.total(cart_items, ten_percent) == Decimal("225.00")
    assert order.subtotal == Decimal("250.00")
    assert order.discount_amount == Decimal("25.00")
    assert order.total_amount == order.subtotal - order.discount_amount
    assert order.status == OrderStatus.COMPLETED
    assert order.id is None
    assert (order.branch_id, order.cashier_id, order.customer_id) == (1, 7, 3)
    assert [(i.product_id, i.quantity) for i in order.items] == [(101, 2), (102, 1)]


def test_order_is_frozen(cart_items):
    order = materialize(cart_items, None, "CARD", branch_id=1, cashier_id=1)

    with pytest.raises(ValidationError):
        order.total_amount = Decimal("1.00")


def test_payment_type_is_normalized(cart_items):
    order = materialize(cart_items, None, "upi", branch_id=1, cashier_id=1)

    assert order.payment_type == "UPI"


def test_empty_cart_rejected():
    with pytest.raises(EmptyCart):
        materialize([], None, "CASH", branch_id=1, cashier_id=1)


def test_unknown_payment_type_rejected(cart_items):
    with pytest.raises(UnknownPaymentType):
        materialize(cart_items, None, "BARTER", branch_id=1, cashier_id=1)


def test_caller_supplied_payment_types(cart_items):
    order = materialize(
        cart_items,
        None,
        "WALLET",
        branch_id=1,
        cashier_id=1,
        known_payment_types=["CASH", "WALLET"],
    )

    assert order.payment_type == "WALLET"


def test_invalid_line_item_rejected_before_order_exists():
    items = [LineItem(product_id=1, unit_price=Decimal("5"), quantity=0)]

    with pytest.raises(InvalidLineItem):
        materialize(items, None, "CASH", branch_id=1, cashier_id=1)


def test_created_at_defaults_to_now_utc(cart_items):
    before = datetime.now(timezone.utc)
    order = materialize(cart_items, None, "CASH", branch_id=1, cashier_id=1)

    assert order.created_at >= before
    assert order.created_at.tzinfo is not None


def test_pending_path_for_held_sales(cart_items):
    order = materialize(cart_items, None, "CASH", branch_id=1, cashier_id=1, status=OrderStatus.PENDING)

    assert order.status == OrderStatus.PENDING


def test_materialize_cart_carries_customer_and_note():
    cart = pricing.add_item(Cart(customer_id=9, note="gift wrap"), 101, "100", quantity=2)
    cart = cart.model_copy(update={"discount": DiscountRule(kind=DiscountKind.AMOUNT, value=Decimal("500"))})

    order = materialize_cart(cart, "CARD", branch_id=2, cashier_id=4)

    assert order.customer_id == 9
    assert order.note == "gift wrap"
    assert order.total_amount == Decimal("0.00")
    assert order.discount_amount == Decimal("200.00")
