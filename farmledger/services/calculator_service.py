from typing import Iterable, List, Optional

from farmledger.core.logging import get_logger
from farmledger.db.session import get_database
from farmledger.models.computation import CalculatorComputation, MolassesEntry, SugarcaneEntry
from farmledger.repositories.farm_store import FarmStore
from farmledger.schemas.computation import ComputationCreate, ComputationTotals
from farmledger.utils.validation import validate_entries

log = get_logger("calculator")


def compute_total(entries: Iterable, quantity_field: str) -> float:
    """Sum of price x quantity, reading the quantity from ``quantity_field``."""
    return sum(entry.price * getattr(entry, quantity_field) for entry in entries)


def compute_totals(
    sugarcane_entries: Iterable[SugarcaneEntry],
    molasses_entries: Iterable[MolassesEntry]
) -> ComputationTotals:
    total_sugarcane = compute_total(sugarcane_entries, "bags")
    total_molasses = compute_total(molasses_entries, "kilos")
    return ComputationTotals(
        total_sugarcane=total_sugarcane,
        total_molasses=total_molasses,
        grand_total=total_sugarcane + total_molasses,
    )


class CalculatorService:
    """Saved receipt computations: create, list, get, delete. Never updated."""

    @staticmethod
    async def create(computation_in: ComputationCreate, farm_id: Optional[str] = None) -> CalculatorComputation:
        validate_entries(computation_in.sugarcane_entries, computation_in.molasses_entries)
        totals = compute_totals(computation_in.sugarcane_entries, computation_in.molasses_entries)

        db = await get_database()
        store = FarmStore(db, farm_id)
        computation = CalculatorComputation(
            **computation_in.model_dump(),
            **totals.model_dump(),
        )
        computation = await store.computations.create(computation)
        log.info("Saved computation %s totalling %.2f", computation.id, computation.grand_total)
        return computation

    @staticmethod
    async def list(farm_id: Optional[str] = None) -> List[CalculatorComputation]:
        db = await get_database()
        return await FarmStore(db, farm_id).computations.list(sort=[("created_at", -1)])

    @staticmethod
    async def get(computation_id: str, farm_id: Optional[str] = None) -> Optional[CalculatorComputation]:
        db = await get_database()
        return await FarmStore(db, farm_id).computations.get(computation_id)

    @staticmethod
    async def delete(computation_id: str, farm_id: Optional[str] = None) -> bool:
        db = await get_database()
        return await FarmStore(db, farm_id).computations.delete(computation_id)
