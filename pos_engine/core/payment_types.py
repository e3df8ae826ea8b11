# =========================================================
# PAYMENT TYPES
#
# Payment codes are an open set: the backend may introduce
# new ones at any time. Checkout validates against the
# configured set, reporting passes every code through.
# =========================================================

from pos_engine.core.config import settings
from pos_engine.core.exceptions import UnknownPaymentType


def normalize_payment_type(code) -> str | None:
    if code is None:
        return None

    normalized = str(code).strip().upper()
    return normalized or None


def validate_payment_type(code, known=None) -> str:
    allowed = {normalize_payment_type(c) for c in (known or settings.KNOWN_PAYMENT_TYPES)}
    normalized = normalize_payment_type(code)

    if normalized is None or normalized not in allowed:
        raise UnknownPaymentType(f"Unknown payment type: {code!r}")

    return normalized


def payment_label(code) -> str:
    if not code:
        return "N/A"

    return settings.PAYMENT_TYPE_LABELS.get(code, code)
