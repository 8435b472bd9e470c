from typing import List, Optional, Type
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from farmledger.api.deps import get_farm_id, raise_http
from farmledger.models.debt import Debt
from farmledger.models.employee import Driver, Employee
from farmledger.models.expense import OtherExpense
from farmledger.models.group import Group
from farmledger.models.lookup import Destination, Land, Plate
from farmledger.models.travel import Travel
from farmledger.schemas.records import (
    DebtCreate,
    DebtUpdate,
    DestinationCreate,
    DestinationUpdate,
    DriverCreate,
    DriverUpdate,
    EmployeeCreate,
    EmployeeUpdate,
    ExpenseCreate,
    ExpenseUpdate,
    GroupCreate,
    GroupUpdate,
    LookupCreate,
    LookupUpdate,
    TravelCreate,
    TravelUpdate,
)
from farmledger.services import record_service
from farmledger.services.record_service import RecordService
from farmledger.utils.validation import LedgerValidationError


def record_router(
    service: RecordService,
    model: Type[BaseModel],
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    label: str
) -> APIRouter:
    """List/get/create/update/delete endpoints for one record collection."""
    router = APIRouter()
    not_found = f"{label} not found"

    @router.get("/", response_model=List[model])
    async def list_records(farm_id: Optional[str] = Depends(get_farm_id)):
        return await service.list(farm_id)

    @router.post("/", response_model=model)
    async def create_record(record_in: create_schema, farm_id: Optional[str] = Depends(get_farm_id)):
        try:
            return await service.create(record_in, farm_id)
        except LedgerValidationError as e:
            raise_http(e)

    @router.get("/{record_id}", response_model=model)
    async def get_record(record_id: str, farm_id: Optional[str] = Depends(get_farm_id)):
        record = await service.get(record_id, farm_id)
        if not record:
            raise HTTPException(status_code=404, detail=not_found)
        return record

    @router.patch("/{record_id}", response_model=model)
    async def update_record(
        record_id: str,
        record_in: update_schema,
        farm_id: Optional[str] = Depends(get_farm_id)
    ):
        record = await service.update(record_id, record_in, farm_id)
        if not record:
            raise HTTPException(status_code=404, detail=not_found)
        return record

    @router.delete("/{record_id}")
    async def delete_record(record_id: str, farm_id: Optional[str] = Depends(get_farm_id)):
        if not await service.delete(record_id, farm_id):
            raise HTTPException(status_code=404, detail=not_found)
        return {"message": f"{label} deleted successfully"}

    return router


employees = record_router(record_service.employees, Employee, EmployeeCreate, EmployeeUpdate, "Employee")
groups = record_router(record_service.groups, Group, GroupCreate, GroupUpdate, "Group")
travels = record_router(record_service.travels, Travel, TravelCreate, TravelUpdate, "Travel")
drivers = record_router(record_service.drivers, Driver, DriverCreate, DriverUpdate, "Driver")
debts = record_router(record_service.debts, Debt, DebtCreate, DebtUpdate, "Debt")
expenses = record_router(record_service.expenses, OtherExpense, ExpenseCreate, ExpenseUpdate, "Expense")
lands = record_router(record_service.lands, Land, LookupCreate, LookupUpdate, "Land")
plates = record_router(record_service.plates, Plate, LookupCreate, LookupUpdate, "Plate")
destinations = record_router(
    record_service.destinations, Destination, DestinationCreate, DestinationUpdate, "Destination"
)
