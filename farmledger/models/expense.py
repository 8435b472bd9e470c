from typing import Optional
from farmledger.models.base import FarmDocument, Number


class ExpenseCategory:
    LOAN_REPAYMENT = "Loan Repayment"
    LOAN_RENEWAL = "Loan Renewal"


class OtherExpense(FarmDocument):
    """Freestanding operational expense, optionally mirrored from a loan."""
    name: str
    description: str = ""
    amount: Number = 0
    date: str = ""
    category: Optional[str] = None
    related_loan_id: Optional[str] = None
