# schemas/order.py

from enum import Enum
from datetime import datetime
from decimal import Decimal
from typing import Tuple

from pydantic import BaseModel, field_validator

from pos_engine.core.money import stored_money


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class OrderItem(BaseModel):
    id: int | None = None
    product_id: int | None = None
    name: str | None = None
    unit_price: Decimal = Decimal("0.00")
    quantity: int = 0

    class Config:
        from_attributes = True
        frozen = True


class Order(BaseModel):
    id: int | None = None
    branch_id: int | None = None
    cashier_id: int | None = None
    customer_id: int | None = None
    items: Tuple[OrderItem, ...] = ()
    payment_type: str | None = None
    status: OrderStatus = OrderStatus.COMPLETED

    subtotal: Decimal | None = None
    discount_amount: Decimal | None = None
    # Frozen at checkout; reports read it, nothing recomputes it.
    total_amount: Decimal | None = None

    note: str | None = None
    created_at: datetime | None = None

    @field_validator("subtotal", "discount_amount", "total_amount", mode="before")
    @classmethod
    def _lenient_amounts(cls, value):
        return stored_money(value)

    class Config:
        from_attributes = True
        frozen = True
