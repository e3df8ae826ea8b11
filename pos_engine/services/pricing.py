# =========================================================
# CART PRICING ENGINE
#
# - subtotal / discount / total are pure and recomputed in
#   full after every cart edit (no incremental deltas)
# - totals are never negative, whatever the discount rule
# - cart edits return a new Cart; nothing is shared between
#   checkout sessions
# =========================================================

from decimal import Decimal

from pos_engine.core.exceptions import InvalidLineItem
from pos_engine.core.money import ZERO, clamp, non_negative, to_money
from pos_engine.schemas.cart import Cart, CartTotals, DiscountKind, DiscountRule, LineItem

HUNDRED = Decimal("100")


# =========================================================
# PRICING
# =========================================================
def subtotal(items) -> Decimal:
    total_amount = ZERO

    for item in items:
        if item.quantity is None or item.quantity < 1:
            raise InvalidLineItem(f"Quantity for product {item.product_id} must be at least 1")

        if item.unit_price is None or item.unit_price < 0:
            raise InvalidLineItem(f"Price for product {item.product_id} cannot be negative")

        total_amount += to_money(item.unit_price) * item.quantity

    return to_money(total_amount)


def discount_amount(subtotal_amount: Decimal, rule: DiscountRule | None) -> Decimal:
    if rule is None or subtotal_amount <= 0:
        return ZERO

    value = to_money(rule.value)

    if rule.kind == DiscountKind.PERCENTAGE:
        rate = clamp(value, ZERO, HUNDRED)
        amount = to_money(subtotal_amount * rate / HUNDRED)
    else:
        amount = value

    return clamp(amount, ZERO, subtotal_amount)


def total(items, rule: DiscountRule | None = None) -> Decimal:
    base = subtotal(items)
    return non_negative(base - discount_amount(base, rule))


def price_cart(cart: Cart) -> CartTotals:
    base = subtotal(cart.items)
    discount = discount_amount(base, cart.discount)

    return CartTotals(
        subtotal=base,
        discount_amount=discount,
        total=non_negative(base - discount),
        item_count=sum(item.quantity for item in cart.items),
    )


# =========================================================
# CART EDITING
# =========================================================
def add_item(cart: Cart, product_id: int, unit_price, name: str | None = None, quantity: int = 1) -> Cart:
    if quantity < 1:
        raise InvalidLineItem("Item quantity must be greater than zero")

    items = list(cart.items)

    for index, item in enumerate(items):
        if item.product_id == product_id:
            items[index] = item.model_copy(update={"quantity": item.quantity + quantity})
            break
    else:
        items.append(
            LineItem(
                product_id=product_id,
                unit_price=to_money(unit_price),
                quantity=quantity,
                name=name,
            )
        )

    return cart.model_copy(update={"items": items})


def remove_item(cart: Cart, product_id: int) -> Cart:
    items = [item for item in cart.items if item.product_id != product_id]
    return cart.model_copy(update={"items": items})


def update_quantity(cart: Cart, product_id: int, quantity: int) -> Cart:
    if quantity <= 0:
        return remove_item(cart, product_id)

    items = [
        item.model_copy(update={"quantity": quantity}) if item.product_id == product_id else item
        for item in cart.items
    ]
    return cart.model_copy(update={"items": items})


def set_discount_kind(cart: Cart, kind: DiscountKind) -> Cart:
    # Switching between % and fixed starts the new rule from zero
    return cart.model_copy(update={"discount": DiscountRule(kind=kind, value=ZERO)})


def set_discount_value(cart: Cart, value) -> Cart:
    rule = cart.discount.model_copy(update={"value": to_money(value)})
    return cart.model_copy(update={"discount": rule})


def clear_cart() -> Cart:
    return Cart()
