# pos_engine/core/money.py

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from pos_engine.core.exceptions import InsufficientStock
from pos_engine.core.log import logger

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"Not a monetary amount: {value!r}")

    if isinstance(value, float):
        # str() first so 0.1 stays 0.1 instead of its binary expansion
        value = str(value)

    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Not a monetary amount: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Not a monetary amount: {value!r}")

    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def safe_money(value) -> Decimal:
    """Lenient to_money for reporting: anything unusable counts as zero."""
    if value is None:
        return ZERO

    try:
        return to_money(value)
    except ValueError:
        return ZERO


def stored_money(value) -> Decimal | None:
    # Stored amounts: keep None, zero anything unparseable but keep the record
    if value is None:
        return None

    try:
        return to_money(value)
    except ValueError:
        logger.warning(f"Unparseable amount {value!r} counted as zero")
        return ZERO


def non_negative(amount: Decimal) -> Decimal:
    return amount if amount > 0 else ZERO


def clamp(amount: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return max(low, min(amount, high))


def remaining_quantity(ordered: int, returned: int) -> int:
    return max(0, ordered - returned)


def apply_stock_movement(on_hand: int, delta: int, name: str | None = None) -> int:
    new_level = on_hand + delta

    if new_level < 0:
        label = f" for {name}" if name else ""
        raise InsufficientStock(f"Insufficient stock{label}")

    return new_level
