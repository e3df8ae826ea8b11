# schemas/refund.py

from enum import Enum
from datetime import datetime
from decimal import Decimal
from typing import Tuple

from pydantic import BaseModel, field_validator

from pos_engine.core.money import stored_money


class RefundState(str, Enum):
    NO_REFUND = "NO_REFUND"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"
    FULLY_REFUNDED = "FULLY_REFUNDED"


class ReturnSelection(BaseModel):
    line_item_id: int
    return_qty: int


class RefundItem(BaseModel):
    line_item_id: int
    product_id: int | None = None
    quantity: int
    unit_price: Decimal
    amount: Decimal

    class Config:
        from_attributes = True
        frozen = True


class Refund(BaseModel):
    id: int | None = None
    order_id: int | None = None
    reason: str | None = None
    amount: Decimal | None = None
    payment_type: str | None = None
    cashier_id: int | None = None
    branch_id: int | None = None
    shift_report_id: int | None = None
    # Empty for legacy amount-only refunds.
    items: Tuple[RefundItem, ...] = ()
    created_at: datetime | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _lenient_amount(cls, value):
        return stored_money(value)

    class Config:
        from_attributes = True
        frozen = True
