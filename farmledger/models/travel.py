"""
Travel model - one haulage trip with its income and cost data.

Attendance is captured when the travel is recorded and never re-derived from
the group's current members, so wages computed for old travels stay stable
after the crew changes.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from farmledger.models.base import FarmDocument, Number, new_id


class AttendanceEntry(BaseModel):
    employee_id: str
    present: bool = False


class TravelExpense(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    amount: Number = 0


class Travel(FarmDocument):
    name: str
    date: Optional[str] = None  # YYYY-MM-DD
    land: str = ""
    driver: str = ""  # employee id
    driver_tip: Number = 0
    plate_number: str = ""
    destination: str = ""
    ticket: Optional[str] = None
    pstc: Optional[str] = None

    tons: Number = 0
    bags: Number = 0
    sugarcane_price: Number = 0
    molasses: Number = 0
    molasses_price: Number = 0

    group_id: str = ""
    attendance: List[AttendanceEntry] = []
    expenses: List[TravelExpense] = []

    @field_validator("tons")
    @classmethod
    def _tons_not_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("tons must be zero or positive")
        return value

    def is_present(self, employee_id: str) -> bool:
        """Whether the attendance snapshot marks the employee present."""
        return any(a.employee_id == employee_id and a.present for a in self.attendance)
