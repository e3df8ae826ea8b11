# schemas/report.py

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel, Field, model_validator

from pos_engine.core.clock import is_before
from pos_engine.schemas.order import Order
from pos_engine.schemas.refund import Refund
from pos_engine.schemas.shift import ShiftSession


class ReportWindow(BaseModel):
    # A plain date covers the whole day; a datetime is an exact bound.
    start: datetime | date
    end: datetime | date

    @model_validator(mode="after")
    def _check_order(self):
        if isinstance(self.start, datetime) and isinstance(self.end, datetime):
            backwards = is_before(self.end, self.start)
        else:
            start_day = self.start.date() if isinstance(self.start, datetime) else self.start
            end_day = self.end.date() if isinstance(self.end, datetime) else self.end
            backwards = end_day < start_day

        if backwards:
            raise ValueError("Report window must not end before it starts")

        return self


class ProductSales(BaseModel):
    product_id: int
    name: str
    quantity_sold: int
    revenue: Decimal


class DailySales(BaseModel):
    date: date
    sales: Decimal
    order_count: int = 0


class PaymentSummary(BaseModel):
    type: str
    label: str
    total_amount: Decimal
    transaction_count: int
    percentage: Decimal


class AggregateSummary(BaseModel):
    gross_sales: Decimal
    net_sales: Decimal
    refund_total: Decimal
    order_count: int
    refund_count: int
    avg_order_value: Decimal
    items_sold: int = 0
    payment_breakdown: Dict[str, Decimal] = Field(default_factory=dict)
    payment_summary: List[PaymentSummary] = Field(default_factory=list)
    top_products: List[ProductSales] = Field(default_factory=list)
    daily_series: List[DailySales] = Field(default_factory=list)
    start_date: date | None = None
    end_date: date | None = None


class ShiftSummary(AggregateSummary):
    session: ShiftSession
    duration_hours: int
    recent_orders: List[Order] = Field(default_factory=list)
    recent_refunds: List[Refund] = Field(default_factory=list)


class Transaction(BaseModel):
    id: str
    type: str
    order_id: int | None = None
    refund_id: int | None = None
    date: datetime | None = None
    amount: Decimal
    payment_type: str | None = None
    description: str


class TransactionLedger(BaseModel):
    transactions: List[Transaction]
    total_sales: Decimal
    total_refunds: Decimal
    net_amount: Decimal
    transaction_count: int
