from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException

from farmledger.api.deps import get_farm_id, raise_http
from farmledger.models.computation import CalculatorComputation
from farmledger.schemas.computation import ComputationCreate
from farmledger.services.calculator_service import CalculatorService
from farmledger.utils.validation import LedgerValidationError

router = APIRouter()


@router.get("/", response_model=List[CalculatorComputation])
async def list_computations(farm_id: Optional[str] = Depends(get_farm_id)):
    return await CalculatorService.list(farm_id)


@router.post("/", response_model=CalculatorComputation)
async def create_computation(computation_in: ComputationCreate, farm_id: Optional[str] = Depends(get_farm_id)):
    """Compute and save receipt totals"""
    try:
        return await CalculatorService.create(computation_in, farm_id)
    except LedgerValidationError as e:
        raise_http(e)


@router.get("/{computation_id}", response_model=CalculatorComputation)
async def get_computation(computation_id: str, farm_id: Optional[str] = Depends(get_farm_id)):
    computation = await CalculatorService.get(computation_id, farm_id)
    if not computation:
        raise HTTPException(status_code=404, detail="Computation not found")
    return computation


@router.delete("/{computation_id}")
async def delete_computation(computation_id: str, farm_id: Optional[str] = Depends(get_farm_id)):
    if not await CalculatorService.delete(computation_id, farm_id):
        raise HTTPException(status_code=404, detail="Computation not found")
    return {"message": "Computation deleted successfully"}
