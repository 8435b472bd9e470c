from typing import Optional
from fastapi import Header, HTTPException

from farmledger.services.analytics import TravelFilter
from farmledger.utils.validation import LedgerValidationError, LoanConflictError


async def get_farm_id(x_farm_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """Farm scope of the request; absent header means the root scope."""
    return x_farm_id or None


async def get_travel_filter(
    group_id: Optional[str] = None,
    land: Optional[str] = None,
    destination: Optional[str] = None,
    plate_number: Optional[str] = None,
    driver: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> TravelFilter:
    try:
        return TravelFilter(
            group_ids=[g for g in (group_id or "").split(",") if g],
            land=land,
            destination=destination,
            plate_number=plate_number,
            driver=driver,
            date_from=date_from,
            date_to=date_to,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def raise_http(error: Exception) -> None:
    """Translate a service error into the matching HTTP error."""
    if isinstance(error, LoanConflictError):
        raise HTTPException(status_code=409, detail=str(error))
    if isinstance(error, LedgerValidationError):
        raise HTTPException(status_code=400, detail=str(error))
    raise error
