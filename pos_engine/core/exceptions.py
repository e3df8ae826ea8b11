# =========================================================
# POS ENGINE ERRORS
#
# Every validation failure in the cart, order, refund and
# shift layers surfaces as one of these. Aggregation never
# raises for bad data; it skips or zeroes the record instead.
# =========================================================


class PosEngineError(Exception):
    detail = "Point of sale operation failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.detail
        super().__init__(self.detail)


# =========================================================
# CART / ORDER
# =========================================================
class CartError(PosEngineError):
    detail = "Cart is invalid"


class InvalidLineItem(CartError):
    detail = "Line item price must not be negative and quantity must be at least 1"


class EmptyCart(CartError):
    detail = "Cart is empty. Add products before processing payment."


class UnknownPaymentType(CartError):
    detail = "Unknown payment type"


# =========================================================
# REFUNDS
# =========================================================
class RefundError(PosEngineError):
    detail = "Refund rejected"


class OrderNotFound(RefundError):
    detail = "Order not found"


class EmptySelection(RefundError):
    detail = "Please select at least one item to return"


class LineItemNotFound(RefundError):
    detail = "Selected item is not part of this order"


class OverReturn(RefundError):
    detail = "Return quantity exceeds what remains refundable"


class MissingReason(RefundError):
    detail = "Return reason is required"


class MissingRefundMethod(RefundError):
    detail = "Refund method is required"


class AlreadyFullyRefunded(RefundError):
    detail = "Order has already been fully refunded"


# =========================================================
# SHIFTS
# =========================================================
class ShiftError(PosEngineError):
    detail = "Shift operation failed"


class AlreadyClosed(ShiftError):
    detail = "Shift has already been closed"


class InvalidEndTime(ShiftError):
    detail = "Shift cannot end before it started"


class ShiftAlreadyOpen(ShiftError):
    detail = "Cashier already has an open shift"


# =========================================================
# STOCK
# =========================================================
class InsufficientStock(PosEngineError):
    detail = "Insufficient stock"
