from decimal import Decimal

import pytest

from pos_engine.core.exceptions import InvalidLineItem
from pos_engine.schemas.cart import Cart, DiscountKind, DiscountRule, LineItem
from pos_engine.services import pricing


# =========================================================
# SUBTOTAL / DISCOUNT / TOTAL
# =========================================================
def test_cart_with_ten_percent_discount(cart_items, ten_percent):
    base = pricing.subtotal(cart_items)

    assert base == Decimal("250.00")
    assert pricing.discount_amount(base, ten_percent) == Decimal("25.00")
    assert pricing.total(cart_items, ten_percent) == Decimal("225.00")


def test_fixed_discount_larger_than_subtotal_is_clamped(cart_items):
    rule = DiscountRule(kind=DiscountKind.AMOUNT, value=Decimal("1000"))

    assert pricing.discount_amount(Decimal("250.00"), rule) == Decimal("250.00")
    assert pricing.total(cart_items, rule) == Decimal("0.00")


def test_percentage_above_hundred_is_clamped(cart_items):
    rule = DiscountRule(kind=DiscountKind.PERCENTAGE, value=Decimal("150"))

    assert pricing.discount_amount(Decimal("250.00"), rule) == Decimal("250.00")
    assert pricing.total(cart_items, rule) == Decimal("0.00")


@pytest.mark.parametrize(
    "kind, value",
    [
        (DiscountKind.PERCENTAGE, "-20"),
        (DiscountKind.AMOUNT, "-20"),
        (DiscountKind.PERCENTAGE, "100"),
        (DiscountKind.AMOUNT, "249.99"),
        (DiscountKind.AMOUNT, "0"),
    ],
)
def test_total_never_negative_and_discount_never_negative(cart_items, kind, value):
    rule = DiscountRule(kind=kind, value=Decimal(value))
    base = pricing.subtotal(cart_items)
    discount = pricing.discount_amount(base, rule)

    assert Decimal("0") <= discount <= base
    assert pricing.total(cart_items, rule) >= 0


def test_no_rule_means_no_discount(cart_items):
    assert pricing.total(cart_items, None) == Decimal("250.00")


def test_duplicate_products_are_summed_not_merged():
    items = [
        LineItem(product_id=1, unit_price=Decimal("10"), quantity=1),
        LineItem(product_id=1, unit_price=Decimal("10"), quantity=2),
    ]

    assert pricing.subtotal(items) == Decimal("30.00")


@pytest.mark.parametrize(
    "price, quantity",
    [("-1", 1), ("10", 0), ("10", -2)],
)
def test_invalid_line_items_rejected(price, quantity):
    items = [LineItem(product_id=1, unit_price=Decimal(price), quantity=quantity)]

    with pytest.raises(InvalidLineItem):
        pricing.subtotal(items)


def test_empty_cart_totals_zero():
    assert pricing.subtotal([]) == Decimal("0.00")
    assert pricing.total([], DiscountRule(kind=DiscountKind.AMOUNT, value=Decimal("5"))) == Decimal("0.00")


# =========================================================
# CART EDITING
# =========================================================
def test_adding_same_product_twice_bumps_quantity():
    cart = Cart()
    cart = pricing.add_item(cart, 101, "100", name="Polo T-Shirt")
    cart = pricing.add_item(cart, 101, "100", name="Polo T-Shirt")
    cart = pricing.add_item(cart, 102, "50", name="Socks")

    assert [(i.product_id, i.quantity) for i in cart.items] == [(101, 2), (102, 1)]
    assert pricing.price_cart(cart).total == Decimal("250.00")


def test_cart_edits_do_not_mutate_the_original():
    original = pricing.add_item(Cart(), 101, "100")
    edited = pricing.update_quantity(original, 101, 5)

    assert original.items[0].quantity == 1
    assert edited.items[0].quantity == 5


def test_update_quantity_to_zero_removes_item():
    cart = pricing.add_item(Cart(), 101, "100")
    cart = pricing.add_item(cart, 102, "50")

    cart = pricing.update_quantity(cart, 101, 0)

    assert [i.product_id for i in cart.items] == [102]


def test_switching_discount_kind_resets_value():
    cart = pricing.add_item(Cart(), 101, "100", quantity=2)
    cart = pricing.set_discount_value(cart, "10")

    assert pricing.price_cart(cart).discount_amount == Decimal("20.00")

    cart = pricing.set_discount_kind(cart, DiscountKind.AMOUNT)

    assert cart.discount.value == Decimal("0")
    assert pricing.price_cart(cart).total == Decimal("200.00")


def test_price_cart_recomputes_after_every_edit():
    cart = pricing.set_discount_value(Cart(), "10")
    cart = pricing.add_item(cart, 101, "100", quantity=2)
    cart = pricing.add_item(cart, 102, "50")

    totals = pricing.price_cart(cart)
    assert (totals.subtotal, totals.discount_amount, totals.total, totals.item_count) == (
        Decimal("250.00"),
        Decimal("25.00"),
        Decimal("225.00"),
        3,
    )

    cart = pricing.remove_item(cart, 102)
    assert pricing.price_cart(cart).total == Decimal("180.00")


def test_clear_cart_resets_everything():
    cleared = pricing.clear_cart()

    assert cleared.items == []
    assert cleared.discount.value == Decimal("0")
    assert cleared.customer_id is None
