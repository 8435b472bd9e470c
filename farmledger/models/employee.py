from enum import Enum
from farmledger.models.base import FarmDocument, Number


class EmployeeType(str, Enum):
    DRIVER = "Driver"
    STAFF = "Staff"
    HELPER = "Helper"


class Employee(FarmDocument):
    name: str
    type: EmployeeType


class Driver(FarmDocument):
    """Flat per-trip base pay for an employee who drives."""
    employee_id: str
    wage: Number = 0
