from pydantic import BaseModel
from datetime import datetime


class CashierActivity(BaseModel):
    cashier_id: int
    name: str | None = None
    last_login_at: datetime | None = None

    class Config:
        from_attributes = True


class InactiveCashier(BaseModel):
    cashier_id: int
    name: str
    last_login_at: datetime | None
    days_inactive: int | None
