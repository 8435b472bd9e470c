from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException

from farmledger.api.deps import get_farm_id, raise_http
from farmledger.models.loan import Loan
from farmledger.schemas.loan import (
    LoanCreate,
    LoanPaymentCreate,
    LoanRenewRequest,
    LoanUpdate,
    LoanUsageCreate,
)
from farmledger.services.loan_service import LoanService
from farmledger.utils.validation import LedgerValidationError, LoanConflictError

router = APIRouter()


@router.get("/", response_model=List[Loan])
async def list_loans(farm_id: Optional[str] = Depends(get_farm_id)):
    """List loans, newest first"""
    return await LoanService.list(farm_id)


@router.post("/", response_model=Loan)
async def create_loan(loan_in: LoanCreate, farm_id: Optional[str] = Depends(get_farm_id)):
    """Open a new loan"""
    try:
        return await LoanService.create(loan_in, farm_id)
    except LedgerValidationError as e:
        raise_http(e)


@router.get("/{loan_id}", response_model=Loan)
async def get_loan(loan_id: str, farm_id: Optional[str] = Depends(get_farm_id)):
    loan = await LoanService.get(loan_id, farm_id)
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")
    return loan


@router.patch("/{loan_id}", response_model=Loan)
async def update_loan(loan_id: str, loan_in: LoanUpdate, farm_id: Optional[str] = Depends(get_farm_id)):
    """Edit description and dates"""
    try:
        loan = await LoanService.update_details(loan_id, loan_in, farm_id)
    except LedgerValidationError as e:
        raise_http(e)
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")
    return loan


@router.post("/{loan_id}/payments", response_model=Loan)
async def add_payment(loan_id: str, payment_in: LoanPaymentCreate, farm_id: Optional[str] = Depends(get_farm_id)):
    """Record a repayment"""
    try:
        loan = await LoanService.add_payment(loan_id, payment_in, farm_id)
    except (LedgerValidationError, LoanConflictError) as e:
        raise_http(e)
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")
    return loan


@router.post("/{loan_id}/usages", response_model=Loan)
async def add_usage(loan_id: str, usage_in: LoanUsageCreate, farm_id: Optional[str] = Depends(get_farm_id)):
    """Record how part of the principal was spent"""
    try:
        loan = await LoanService.add_usage(loan_id, usage_in, farm_id)
    except (LedgerValidationError, LoanConflictError) as e:
        raise_http(e)
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")
    return loan


@router.post("/{loan_id}/renew", response_model=Loan)
async def renew_loan(loan_id: str, renew_in: LoanRenewRequest, farm_id: Optional[str] = Depends(get_farm_id)):
    """Start a new repayment cycle"""
    try:
        loan = await LoanService.renew(loan_id, renew_in, farm_id)
    except (LedgerValidationError, LoanConflictError) as e:
        raise_http(e)
    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")
    return loan


@router.delete("/{loan_id}")
async def delete_loan(loan_id: str, farm_id: Optional[str] = Depends(get_farm_id)):
    """Delete a loan and its linked expenses"""
    if not await LoanService.delete(loan_id, farm_id):
        raise HTTPException(status_code=404, detail="Loan not found")
    return {"message": "Loan deleted successfully"}
