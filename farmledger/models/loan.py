"""
Loan model - a borrowed principal repaid over one or more cycles.

Design principles:
- Payments, usages and renewals are embedded, append-only lists
- A renewal starts a new cycle: current payments are cleared, lifetime
  totals are kept
- Usages record how the principal was spent and never touch the balance
- ``version`` guards read-modify-write updates against lost writes

Invariants:
- remaining_balance == max(0, total_amount - total_paid_current)
  once a payment is made; right after a renewal the balance is
  max(0, total_amount - renewal payment)
- paid == (remaining_balance <= 0)
- total_paid_lifetime never decreases
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, computed_field
from farmledger.models.base import FarmDocument, Number, _utcnow, new_id


class LoanStatus(str, Enum):
    ACTIVE = "active"
    PAID = "paid"


class LoanPayment(BaseModel):
    id: str = Field(default_factory=new_id)
    loan_id: str
    amount: Number = 0
    payment_date: str
    other_expense_id: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class LoanUsage(BaseModel):
    id: str = Field(default_factory=new_id)
    loan_id: str
    description: str
    amount: Number = 0
    usage_date: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class LoanRenewal(BaseModel):
    id: str = Field(default_factory=new_id)
    loan_id: str
    previous_due_date: str
    new_due_date: str
    renewal_payment: Number = 0
    previous_remaining_balance: Number = 0
    new_remaining_balance: Number = 0
    other_expense_id: Optional[str] = None
    renewed_at: datetime = Field(default_factory=_utcnow)


class Loan(FarmDocument):
    description: str = ""
    loan_date: str
    due_date: str

    total_amount: Number = 0
    remaining_balance: Number = 0
    total_paid_current: Number = 0
    total_paid_lifetime: Number = 0
    paid: bool = False

    payments: List[LoanPayment] = []
    usages: List[LoanUsage] = []
    renewals: List[LoanRenewal] = []

    version: int = 1

    @computed_field
    @property
    def status(self) -> LoanStatus:
        return LoanStatus.PAID if self.remaining_balance <= 0 else LoanStatus.ACTIVE

    def total_used(self) -> float:
        """Principal drawn down so far, independent of repayment."""
        return sum(u.amount for u in self.usages)

    def available_principal(self) -> float:
        return self.total_amount - self.total_used()

    def to_document(self) -> dict:
        return self.model_dump(exclude={"id", "status"})
