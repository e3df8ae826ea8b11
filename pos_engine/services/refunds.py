# =========================================================
# REFUND RECONCILIATION ENGINE
#
# - Refunds are priced from the original unit price; the
#   order-level discount is NOT pro-rated onto returns
# - Per line item: cumulative returned qty <= ordered qty
# - Per order: cumulative refund amount <= total_amount
# - NO_REFUND -> PARTIALLY_REFUNDED -> FULLY_REFUNDED, never back
#
# Caller precondition: prior_refunds must be a consistent view
# of every refund already stored for the order. Reading them,
# calling reconcile() and saving the result has to happen
# inside one serializing transaction (or per-order lock),
# otherwise two concurrent refunds can both pass the ceiling.
# =========================================================

from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import ValidationError

from pos_engine.core.exceptions import (
    AlreadyFullyRefunded,
    EmptySelection,
    LineItemNotFound,
    MissingReason,
    MissingRefundMethod,
    OrderNotFound,
    OverReturn,
)
from pos_engine.core.log import logger
from pos_engine.core.money import ZERO, non_negative, remaining_quantity, safe_money, to_money
from pos_engine.core.payment_types import normalize_payment_type
from pos_engine.schemas.order import Order
from pos_engine.schemas.refund import Refund, RefundItem, RefundState, ReturnSelection


# =========================================================
# HISTORY HELPERS
# =========================================================
def _refunds_for(order: Order, prior_refunds):
    return [
        refund
        for refund in prior_refunds or []
        if refund.order_id is None or order.id is None or refund.order_id == order.id
    ]


def returned_quantities(prior_refunds) -> dict[int, int]:
    returned = defaultdict(int)

    for refund in prior_refunds or []:
        for item in refund.items:
            returned[item.line_item_id] += item.quantity

    return dict(returned)


def refunded_amount(prior_refunds) -> Decimal:
    return sum((safe_money(refund.amount) for refund in prior_refunds or []), ZERO)


def remaining_returnable(order: Order, prior_refunds=()) -> dict[int, int]:
    returned = returned_quantities(_refunds_for(order, prior_refunds))

    return {
        item.id: remaining_quantity(item.quantity, returned.get(item.id, 0))
        for item in order.items
        if item.id is not None
    }


def remaining_refundable_amount(order: Order, prior_refunds=()) -> Decimal:
    already = refunded_amount(_refunds_for(order, prior_refunds))
    return non_negative(safe_money(order.total_amount) - already)


def refund_state(order: Order, prior_refunds=()) -> RefundState:
    history = _refunds_for(order, prior_refunds)

    if not history:
        return RefundState.NO_REFUND

    total_amount = safe_money(order.total_amount)
    remaining = remaining_returnable(order, history)

    every_unit_back = bool(remaining) and all(qty == 0 for qty in remaining.values())
    amount_exhausted = total_amount > 0 and refunded_amount(history) >= total_amount

    if every_unit_back or amount_exhausted:
        return RefundState.FULLY_REFUNDED

    return RefundState.PARTIALLY_REFUNDED


# =========================================================
# RECONCILE
# =========================================================
def _collect_selection(selected_returns) -> dict[int, int]:
    quantities = defaultdict(int)

    for raw in selected_returns or []:
        if isinstance(raw, ReturnSelection):
            selection = raw
        else:
            try:
                selection = ReturnSelection.model_validate(raw)
            except ValidationError as e:
                bad_fields = {err["loc"][0] for err in e.errors() if err["loc"]}

                if "line_item_id" in bad_fields:
                    raise LineItemNotFound(f"Return selection {raw!r} does not name a valid line item") from e

                raise EmptySelection(f"Return selection {raw!r} has no valid quantity") from e

        if selection.return_qty > 0:
            quantities[selection.line_item_id] += selection.return_qty

    return dict(quantities)


def reconcile(
    order: Order | None,
    selected_returns,
    reason: str | None,
    refund_payment_type: str | None = None,
    *,
    prior_refunds=(),
    cashier_id: int | None = None,
    branch_id: int | None = None,
    shift_report_id: int | None = None,
    created_at: datetime | None = None,
) -> Refund:
    if order is None:
        raise OrderNotFound()

    history = _refunds_for(order, prior_refunds)

    if refund_state(order, history) == RefundState.FULLY_REFUNDED:
        raise AlreadyFullyRefunded(f"Order #{order.id} has already been fully refunded")

    selection = _collect_selection(selected_returns)

    if not selection:
        raise EmptySelection()

    # ----------------------------
    # Quantity ceiling per line
    # ----------------------------
    items_by_id = {item.id: item for item in order.items if item.id is not None}
    remaining = remaining_returnable(order, history)

    refund_items = []
    refund_total = ZERO

    for line_item_id, return_qty in selection.items():
        item = items_by_id.get(line_item_id)

        if item is None:
            raise LineItemNotFound(f"Line item {line_item_id} is not part of order #{order.id}")

        left = remaining.get(line_item_id, 0)

        if return_qty > left:
            logger.warning(
                f"Over-return rejected on order #{order.id}, line {line_item_id}: "
                f"requested {return_qty}, remaining {left}"
            )
            raise OverReturn(
                f"Cannot return {return_qty} of {item.name or f'line {line_item_id}'}: "
                f"only {left} remaining"
            )

        unit_price = to_money(item.unit_price)
        line_amount = to_money(unit_price * return_qty)
        refund_total += line_amount

        refund_items.append(
            RefundItem(
                line_item_id=line_item_id,
                product_id=item.product_id,
                quantity=return_qty,
                unit_price=unit_price,
                amount=line_amount,
            )
        )

    # ----------------------------
    # Amount ceiling per order
    # ----------------------------
    refundable = remaining_refundable_amount(order, history)

    if refund_total > refundable:
        logger.warning(
            f"Refund of {refund_total} rejected on order #{order.id}: "
            f"only {refundable} refundable"
        )
        raise OverReturn(
            f"Refund of {refund_total} exceeds the {refundable} still refundable on order #{order.id}"
        )

    if not reason or not reason.strip():
        raise MissingReason()

    method = normalize_payment_type(refund_payment_type) or normalize_payment_type(order.payment_type)

    if method is None:
        raise MissingRefundMethod()

    refund = Refund(
        order_id=order.id,
        reason=reason.strip(),
        amount=refund_total,
        payment_type=method,
        cashier_id=cashier_id if cashier_id is not None else order.cashier_id,
        branch_id=branch_id if branch_id is not None else order.branch_id,
        shift_report_id=shift_report_id,
        items=refund_items,
        created_at=created_at or datetime.now(timezone.utc),
    )

    logger.info(f"Refund of {refund.amount} via {method} reconciled for order #{order.id}")

    return refund


def restock_quantities(refund: Refund) -> dict[int, int]:
    restock = defaultdict(int)

    for item in refund.items:
        if item.product_id is not None:
            restock[item.product_id] += item.quantity

    return dict(restock)
