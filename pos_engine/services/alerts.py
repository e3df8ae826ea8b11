# =========================================================
# STORE ALERTS
#
# - Low stock: quantity below LOW_STOCK_THRESHOLD (0 = out)
# - Inactive cashiers: no login within INACTIVE_CASHIER_DAYS,
#   or never logged in
#
# Thresholds come from settings so every screen shares them.
# =========================================================

from datetime import datetime, timedelta

from pos_engine.core.clock import elapsed, is_before, sort_key
from pos_engine.core.config import settings
from pos_engine.schemas.inventory import StockAlert, StockLevel, StockStatus
from pos_engine.schemas.user import CashierActivity, InactiveCashier
from pos_engine.services.reports import coerce_records


def stock_status(quantity: int | None, threshold: int | None = None) -> StockStatus:
    threshold = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
    quantity = quantity or 0

    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK

    if quantity < threshold:
        return StockStatus.LOW_STOCK

    return StockStatus.IN_STOCK


def low_stock_products(levels, threshold: int | None = None) -> list[StockAlert]:
    alerts = []

    for level in coerce_records(levels, StockLevel):
        status = stock_status(level.quantity, threshold)

        if status == StockStatus.IN_STOCK:
            continue

        alerts.append(
            StockAlert(
                product_id=level.product_id,
                name=level.name or "Unknown",
                quantity=level.quantity or 0,
                status=status,
            )
        )

    # Emptiest shelves first
    alerts.sort(key=lambda x: (x.quantity, x.product_id))
    return alerts


def inactive_cashiers(cashiers, as_of: datetime, days: int | None = None) -> list[InactiveCashier]:
    days = settings.INACTIVE_CASHIER_DAYS if days is None else days
    cutoff = as_of - timedelta(days=days)

    inactive = []

    for cashier in coerce_records(cashiers, CashierActivity):
        last_login = cashier.last_login_at

        if last_login is not None and not is_before(last_login, cutoff):
            continue

        inactive.append(
            InactiveCashier(
                cashier_id=cashier.cashier_id,
                name=cashier.name or "Unknown",
                last_login_at=last_login,
                days_inactive=elapsed(last_login, as_of).days if last_login else None,
            )
        )

    # Never-logged-in first, then the longest silence
    inactive.sort(
        key=lambda x: (x.last_login_at is not None, sort_key(x.last_login_at) if x.last_login_at else datetime.min)
    )
    return inactive
