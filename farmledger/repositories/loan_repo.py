from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from farmledger.models.loan import Loan
from farmledger.repositories.document_repo import DocumentRepository, to_object_id


class LoanRepository(DocumentRepository[Loan]):
    """Loans plus the back-references to their mirrored expenses."""

    def __init__(self, db: AsyncIOMotorDatabase, farm_id: Optional[str] = None):
        super().__init__(db, "loans", Loan, farm_id)

    async def list_newest_first(self) -> list:
        return await self.list(sort=[("created_at", -1)])

    async def _link(self, loan_id: str, array: str, entry_id: str, expense_id: str) -> bool:
        oid = to_object_id(loan_id)
        if oid is None:
            return False
        # Positional update of one embedded entry; the loan version is untouched
        result = await self.collection.update_one(
            self._scoped({"_id": oid, f"{array}.id": entry_id}),
            {"$set": {f"{array}.$.other_expense_id": expense_id}}
        )
        return result.modified_count > 0

    async def link_payment_expense(self, loan_id: str, payment_id: str, expense_id: str) -> bool:
        return await self._link(loan_id, "payments", payment_id, expense_id)

    async def link_renewal_expense(self, loan_id: str, renewal_id: str, expense_id: str) -> bool:
        return await self._link(loan_id, "renewals", renewal_id, expense_id)
