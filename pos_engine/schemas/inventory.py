from enum import Enum

from pydantic import BaseModel


class StockStatus(str, Enum):
    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    IN_STOCK = "in_stock"


class StockLevel(BaseModel):
    product_id: int
    name: str | None = None
    quantity: int | None = None

    class Config:
        from_attributes = True


class StockAlert(BaseModel):
    product_id: int
    name: str
    quantity: int
    status: StockStatus
