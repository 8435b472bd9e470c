"""
CRUD for the plain record collections.

Each collection gets one ``RecordService`` bound to its ``FarmStore``
attribute; endpoints call it with the request's farm scope.
"""

from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from farmledger.core.logging import get_logger
from farmledger.db.session import get_database
from farmledger.models.base import FarmDocument
from farmledger.models.debt import Debt
from farmledger.models.employee import Driver, Employee
from farmledger.models.expense import OtherExpense
from farmledger.models.group import Group
from farmledger.models.lookup import Destination, Land, Plate
from farmledger.models.travel import Travel
from farmledger.repositories.document_repo import DocumentRepository
from farmledger.repositories.farm_store import FarmStore
from farmledger.utils.validation import validate_debt_amount

log = get_logger("records")

T = TypeVar("T", bound=FarmDocument)


class RecordService(Generic[T]):
    def __init__(self, collection: str, model: Type[T], sort: Optional[list] = None):
        self.collection = collection
        self.model = model
        self.sort = sort or [("created_at", -1)]

    async def _repo(self, farm_id: Optional[str]) -> DocumentRepository:
        db = await get_database()
        return getattr(FarmStore(db, farm_id), self.collection)

    def build(self, record_in: BaseModel) -> T:
        """Turn a create request into a record. Override to add checks."""
        return self.model(**record_in.model_dump(exclude_none=True))

    async def list(self, farm_id: Optional[str] = None) -> List[T]:
        repo = await self._repo(farm_id)
        return await repo.list(sort=self.sort)

    async def get(self, record_id: str, farm_id: Optional[str] = None) -> Optional[T]:
        repo = await self._repo(farm_id)
        return await repo.get(record_id)

    async def create(self, record_in: BaseModel, farm_id: Optional[str] = None) -> T:
        record = self.build(record_in)
        repo = await self._repo(farm_id)
        record = await repo.create(record)
        log.info("Created %s %s", self.collection, record.id)
        return record

    async def update(self, record_id: str, record_in: BaseModel, farm_id: Optional[str] = None) -> Optional[T]:
        repo = await self._repo(farm_id)
        return await repo.update(record_id, record_in.model_dump(exclude_unset=True, exclude_none=True))

    async def delete(self, record_id: str, farm_id: Optional[str] = None) -> bool:
        repo = await self._repo(farm_id)
        deleted = await repo.delete(record_id)
        if deleted:
            log.info("Deleted %s %s", self.collection, record_id)
        return deleted


class DebtService(RecordService[Debt]):
    def build(self, record_in: BaseModel) -> Debt:
        debt = super().build(record_in)
        validate_debt_amount(debt.amount)
        return debt


employees = RecordService("employees", Employee, sort=[("name", 1)])
groups = RecordService("groups", Group)
travels = RecordService("travels", Travel, sort=[("date", -1), ("created_at", -1)])
drivers = RecordService("drivers", Driver)
debts = DebtService("debts", Debt, sort=[("date", -1)])
expenses = RecordService("expenses", OtherExpense, sort=[("date", -1)])
lands = RecordService("lands", Land, sort=[("name", 1)])
plates = RecordService("plates", Plate, sort=[("name", 1)])
destinations = RecordService("destinations", Destination, sort=[("name", 1)])
