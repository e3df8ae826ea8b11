# =========================================================
# ORDER MATERIALIZER
#
# Turns a priced cart into an immutable Order. The total is
# frozen here and never recomputed after the store saves it
# (OrderStore.save(order) -> Order with its assigned id).
# =========================================================

from datetime import datetime, timezone

from pos_engine.core.exceptions import EmptyCart
from pos_engine.core.log import logger
from pos_engine.core.money import non_negative, to_money
from pos_engine.core.payment_types import validate_payment_type
from pos_engine.schemas.cart import Cart, DiscountRule
from pos_engine.schemas.order import Order, OrderItem, OrderStatus
from pos_engine.services.pricing import discount_amount, subtotal


def materialize(
    items,
    rule: DiscountRule | None,
    payment_type: str,
    branch_id: int,
    cashier_id: int,
    customer_id: int | None = None,
    *,
    note: str | None = None,
    created_at: datetime | None = None,
    status: OrderStatus = OrderStatus.COMPLETED,
    known_payment_types=None,
) -> Order:
    items = list(items or [])

    if not items:
        raise EmptyCart()

    payment_code = validate_payment_type(payment_type, known_payment_types)

    base = subtotal(items)
    discount = discount_amount(base, rule)

    order = Order(
        branch_id=branch_id,
        cashier_id=cashier_id,
        customer_id=customer_id,
        items=[
            OrderItem(
                product_id=item.product_id,
                name=item.name,
                unit_price=to_money(item.unit_price),
                quantity=item.quantity,
            )
            for item in items
        ],
        payment_type=payment_code,
        status=status,
        subtotal=base,
        discount_amount=discount,
        total_amount=non_negative(base - discount),
        note=note or None,
        created_at=created_at or datetime.now(timezone.utc),
    )

    logger.info(
        f"Order materialized for cashier {cashier_id} at branch {branch_id}: "
        f"{len(items)} items, total {order.total_amount} via {payment_code}"
    )

    return order


def materialize_cart(
    cart: Cart,
    payment_type: str,
    branch_id: int,
    cashier_id: int,
    **kwargs,
) -> Order:
    return materialize(
        cart.items,
        cart.discount,
        payment_type,
        branch_id,
        cashier_id,
        cart.customer_id,
        note=cart.note,
        **kwargs,
    )
