# schemas/cart.py

from enum import Enum
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field


class DiscountKind(str, Enum):
    PERCENTAGE = "percentage"
    AMOUNT = "amount"


class DiscountRule(BaseModel):
    kind: DiscountKind = DiscountKind.PERCENTAGE
    value: Decimal = Decimal("0")


class LineItem(BaseModel):
    product_id: int
    unit_price: Decimal
    quantity: int = 1
    name: str | None = None

    class Config:
        from_attributes = True


class Cart(BaseModel):
    items: List[LineItem] = Field(default_factory=list)
    discount: DiscountRule = Field(default_factory=DiscountRule)
    customer_id: int | None = None
    note: str = ""


class CartTotals(BaseModel):
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal
    item_count: int
