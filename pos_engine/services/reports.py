# =========================================================
# SALES AGGREGATOR
#
# One canonical implementation of every figure the dashboards,
# transactions page, reports and shift close display:
# - gross / refunds / net sales, counts, average order value
# - payment breakdown (unknown codes pass through verbatim)
# - top products by revenue
# - zero-filled daily trend
#
# Partial-failure tolerant: a malformed record is zeroed or
# skipped and logged, it never blanks the whole summary.
# =========================================================

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from pydantic import ValidationError

from pos_engine.core.clock import between, sort_key
from pos_engine.core.config import settings
from pos_engine.core.log import logger
from pos_engine.core.money import CENT, ZERO, safe_money
from pos_engine.core.payment_types import payment_label
from pos_engine.schemas.order import Order
from pos_engine.schemas.refund import Refund
from pos_engine.schemas.report import (
    AggregateSummary,
    DailySales,
    PaymentSummary,
    ProductSales,
    ReportWindow,
    Transaction,
    TransactionLedger,
)


# =========================================================
# HELPER: COERCE RAW RECORDS
# =========================================================
def coerce_records(records, model):
    clean = []

    for raw in records or []:
        if isinstance(raw, model):
            clean.append(raw)
            continue

        try:
            clean.append(model.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping malformed {model.__name__} record: {e.error_count()} errors")

    return clean


# =========================================================
# HELPER: WINDOW BOUNDS
# =========================================================
def _window_bounds(window: ReportWindow):
    if isinstance(window.start, datetime):
        start_dt = window.start
    else:
        start_dt = datetime.combine(window.start, datetime.min.time())

    if isinstance(window.end, datetime):
        end_dt = window.end
    else:
        end_dt = datetime.combine(window.end, datetime.max.time())

    return start_dt, end_dt


def _within(records, window: ReportWindow | None):
    if window is None:
        return list(records)

    start_dt, end_dt = _window_bounds(window)

    return [
        record
        for record in records
        if record.created_at is not None and between(record.created_at, start_dt, end_dt)
    ]


def last_n_days(days: int | None = None, today: date | None = None) -> ReportWindow:
    if days is None:
        days = settings.DASHBOARD_DAYS

    if days < 1:
        raise ValueError(f"Rolling window needs at least one day, got {days}")

    today = today or datetime.now(timezone.utc).date()

    return ReportWindow(start=today - timedelta(days=days - 1), end=today)


# =========================================================
# BREAKDOWNS
# =========================================================
def _payment_code(record) -> str:
    return record.payment_type or settings.DEFAULT_PAYMENT_TYPE


def payment_breakdown(orders) -> dict[str, Decimal]:
    breakdown = defaultdict(lambda: ZERO)

    for order in orders:
        breakdown[_payment_code(order)] += safe_money(order.total_amount)

    return dict(breakdown)


def payment_summary(orders) -> list[PaymentSummary]:
    totals = payment_breakdown(orders)
    counts = defaultdict(int)

    for order in orders:
        counts[_payment_code(order)] += 1

    gross = sum(totals.values(), ZERO)
    results = []

    for code, amount in totals.items():
        if gross == 0:
            percentage = Decimal("0.00")
        else:
            percentage = ((amount / gross) * 100).quantize(CENT)

        results.append(
            PaymentSummary(
                type=code,
                label=payment_label(code),
                total_amount=amount,
                transaction_count=counts[code],
                percentage=percentage,
            )
        )

    results.sort(key=lambda x: (-x.total_amount, x.type))
    return results


def top_products(orders, n: int | None = None) -> list[ProductSales]:
    n = settings.DEFAULT_TOP_PRODUCTS if n is None else n
    product_sales = {}

    for order in orders:
        for item in order.items:
            if item.product_id is None:
                continue

            quantity = item.quantity or 0
            entry = product_sales.setdefault(
                item.product_id,
                {"name": None, "quantity_sold": 0, "revenue": ZERO},
            )

            entry["name"] = entry["name"] or item.name
            entry["quantity_sold"] += quantity
            entry["revenue"] += safe_money(item.unit_price) * quantity

    ranked = sorted(
        product_sales.items(),
        key=lambda x: (-x[1]["revenue"], -x[1]["quantity_sold"], x[0]),
    )

    return [
        ProductSales(
            product_id=product_id,
            name=entry["name"] or "Unknown",
            quantity_sold=entry["quantity_sold"],
            revenue=entry["revenue"],
        )
        for product_id, entry in ranked[: max(n, 0)]
    ]


def daily_series(orders, start: date | None = None, end: date | None = None) -> list[DailySales]:
    sales_by_day = defaultdict(lambda: ZERO)
    orders_by_day = defaultdict(int)

    for order in orders:
        if order.created_at is None:
            continue

        day = order.created_at.date()
        sales_by_day[day] += safe_money(order.total_amount)
        orders_by_day[day] += 1

    if start is None or end is None:
        if not sales_by_day:
            return []

        start = start or min(sales_by_day)
        end = end or max(sales_by_day)

    series = []
    day = start

    while day <= end:
        series.append(
            DailySales(
                date=day,
                sales=sales_by_day.get(day, ZERO),
                order_count=orders_by_day.get(day, 0),
            )
        )
        day += timedelta(days=1)

    return series


# =========================================================
# CORE SALES SUMMARY CALCULATION
# =========================================================
def aggregate(orders, refunds, window: ReportWindow | None = None, *, top_n: int | None = None) -> AggregateSummary:
    orders = _within(coerce_records(orders, Order), window)
    refunds = _within(coerce_records(refunds, Refund), window)

    gross_sales = sum((safe_money(order.total_amount) for order in orders), ZERO)
    refund_total = sum((safe_money(refund.amount) for refund in refunds), ZERO)

    order_count = len(orders)

    if order_count == 0:
        avg_order_value = Decimal("0.00")
    else:
        avg_order_value = (gross_sales / order_count).quantize(CENT)

    start_day = end_day = None
    if window is not None:
        start_dt, end_dt = _window_bounds(window)
        start_day, end_day = start_dt.date(), end_dt.date()

    return AggregateSummary(
        gross_sales=gross_sales,
        # Reporting figure: may go negative, unlike a cart total
        net_sales=gross_sales - refund_total,
        refund_total=refund_total,
        order_count=order_count,
        refund_count=len(refunds),
        avg_order_value=avg_order_value,
        items_sold=sum(item.quantity or 0 for order in orders for item in order.items),
        payment_breakdown=payment_breakdown(orders),
        payment_summary=payment_summary(orders),
        top_products=top_products(orders, top_n),
        daily_series=daily_series(orders, start_day, end_day),
        start_date=start_day,
        end_date=end_day,
    )


# =========================================================
# TRANSACTION LEDGER (SALES + REFUNDS, NEWEST FIRST)
# =========================================================
def transaction_ledger(
    orders,
    refunds,
    window: ReportWindow | None = None,
    *,
    kind: str | None = None,
    payment_type: str | None = None,
) -> TransactionLedger:
    orders = _within(coerce_records(orders, Order), window)
    refunds = _within(coerce_records(refunds, Refund), window)

    if payment_type:
        orders = [order for order in orders if order.payment_type == payment_type]
        refunds = [refund for refund in refunds if refund.payment_type == payment_type]

    transactions = [
        Transaction(
            id=f"order-{order.id}",
            type="SALE",
            order_id=order.id,
            date=order.created_at,
            amount=safe_money(order.total_amount),
            payment_type=order.payment_type,
            description=f"Order #{order.id}",
        )
        for order in orders
    ] + [
        Transaction(
            id=f"refund-{refund.id}",
            type="REFUND",
            order_id=refund.order_id,
            refund_id=refund.id,
            date=refund.created_at,
            amount=-safe_money(refund.amount),
            payment_type=refund.payment_type,
            description=f"Refund #{refund.id} - {refund.reason or 'N/A'}",
        )
        for refund in refunds
    ]

    if kind:
        transactions = [t for t in transactions if t.type == kind.upper()]

    # Undated records sink to the bottom
    transactions.sort(
        key=lambda t: (t.date is not None, sort_key(t.date) if t.date else datetime.min),
        reverse=True,
    )

    total_sales = sum((safe_money(order.total_amount) for order in orders), ZERO)
    total_refunds = sum((safe_money(refund.amount) for refund in refunds), ZERO)

    return TransactionLedger(
        transactions=transactions,
        total_sales=total_sales,
        total_refunds=total_refunds,
        net_amount=total_sales - total_refunds,
        transaction_count=len(transactions),
    )
