from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from farmledger.models.computation import CalculatorComputation
from farmledger.models.debt import Debt
from farmledger.models.employee import Driver, Employee
from farmledger.models.expense import OtherExpense
from farmledger.models.group import Group
from farmledger.models.lookup import Destination, Land, Plate
from farmledger.models.travel import Travel
from farmledger.repositories.document_repo import DocumentRepository
from farmledger.repositories.loan_repo import LoanRepository


class FarmStore:
    """All record collections of one farm scope."""

    def __init__(self, db: AsyncIOMotorDatabase, farm_id: Optional[str] = None):
        self.farm_id = farm_id
        self.employees = DocumentRepository(db, "employees", Employee, farm_id)
        self.groups = DocumentRepository(db, "groups", Group, farm_id)
        self.travels = DocumentRepository(db, "travels", Travel, farm_id)
        self.drivers = DocumentRepository(db, "drivers", Driver, farm_id)
        self.debts = DocumentRepository(db, "debts", Debt, farm_id)
        self.expenses = DocumentRepository(db, "expenses", OtherExpense, farm_id)
        self.loans = LoanRepository(db, farm_id)
        self.computations = DocumentRepository(db, "computations", CalculatorComputation, farm_id)
        self.lands = DocumentRepository(db, "lands", Land, farm_id)
        self.plates = DocumentRepository(db, "plates", Plate, farm_id)
        self.destinations = DocumentRepository(db, "destinations", Destination, farm_id)
