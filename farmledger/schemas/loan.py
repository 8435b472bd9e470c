from typing import Optional
from pydantic import BaseModel, FiniteFloat


class LoanCreate(BaseModel):
    description: str = ""
    loan_date: str
    due_date: str
    total_amount: FiniteFloat


class LoanUpdate(BaseModel):
    """Editable loan details. Balances only change through payments and renewals."""
    description: Optional[str] = None
    loan_date: Optional[str] = None
    due_date: Optional[str] = None


class LoanPaymentCreate(BaseModel):
    amount: FiniteFloat
    payment_date: str


class LoanUsageCreate(BaseModel):
    description: str
    amount: FiniteFloat
    usage_date: str


class LoanRenewRequest(BaseModel):
    new_due_date: str
    renewal_payment: FiniteFloat = 0
    renewal_date: Optional[str] = None  # defaults to today
