"""Request bodies for the plain record collections."""

from typing import List, Optional
from pydantic import BaseModel, FiniteFloat, field_validator
from farmledger.models.employee import EmployeeType
from farmledger.models.travel import AttendanceEntry, TravelExpense


class EmployeeCreate(BaseModel):
    name: str
    type: EmployeeType = EmployeeType.STAFF


class EmployeeUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[EmployeeType] = None


class GroupCreate(BaseModel):
    name: str
    wage: FiniteFloat = 0
    employees: List[str] = []


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    wage: Optional[FiniteFloat] = None
    employees: Optional[List[str]] = None


class DriverCreate(BaseModel):
    employee_id: str
    wage: FiniteFloat = 0


class DriverUpdate(BaseModel):
    wage: Optional[FiniteFloat] = None


class TravelCreate(BaseModel):
    name: str
    date: Optional[str] = None
    land: str = ""
    driver: str = ""
    driver_tip: FiniteFloat = 0
    plate_number: str = ""
    destination: str = ""
    ticket: Optional[str] = None
    pstc: Optional[str] = None
    tons: FiniteFloat = 0
    bags: FiniteFloat = 0
    sugarcane_price: FiniteFloat = 0
    molasses: FiniteFloat = 0
    molasses_price: FiniteFloat = 0
    group_id: str = ""
    attendance: List[AttendanceEntry] = []
    expenses: List[TravelExpense] = []

    @field_validator("tons")
    @classmethod
    def _tons_not_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("tons must be zero or positive")
        return value


class TravelUpdate(BaseModel):
    """Editable travel fields. The attendance snapshot is fixed at creation."""
    name: Optional[str] = None
    date: Optional[str] = None
    land: Optional[str] = None
    driver: Optional[str] = None
    driver_tip: Optional[FiniteFloat] = None
    plate_number: Optional[str] = None
    destination: Optional[str] = None
    ticket: Optional[str] = None
    pstc: Optional[str] = None
    tons: Optional[FiniteFloat] = None
    bags: Optional[FiniteFloat] = None
    sugarcane_price: Optional[FiniteFloat] = None
    molasses: Optional[FiniteFloat] = None
    molasses_price: Optional[FiniteFloat] = None
    group_id: Optional[str] = None
    expenses: Optional[List[TravelExpense]] = None

    @field_validator("tons")
    @classmethod
    def _tons_not_negative(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value < 0:
            raise ValueError("tons must be zero or positive")
        return value


class DebtCreate(BaseModel):
    employee_id: str
    amount: FiniteFloat
    description: str = ""
    date: str = ""
    paid: bool = False


class DebtUpdate(BaseModel):
    paid: bool


class ExpenseCreate(BaseModel):
    name: str
    description: str = ""
    amount: FiniteFloat = 0
    date: str = ""
    category: Optional[str] = None


class ExpenseUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[FiniteFloat] = None
    date: Optional[str] = None
    category: Optional[str] = None


class LookupCreate(BaseModel):
    name: str


class LookupUpdate(BaseModel):
    name: Optional[str] = None


class DestinationCreate(BaseModel):
    name: str
    color: Optional[str] = None


class DestinationUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None
