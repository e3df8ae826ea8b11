# schemas/shift.py

from datetime import datetime

from pydantic import BaseModel


class ShiftSession(BaseModel):
    id: int | None = None
    cashier_id: int
    branch_id: int | None = None
    shift_start: datetime
    shift_end: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.shift_end is None

    class Config:
        from_attributes = True
        frozen = True
