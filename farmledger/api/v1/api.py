from fastapi import APIRouter
from farmledger.api.v1.endpoints import analytics, computations, loans, records

api_router = APIRouter()

api_router.include_router(records.employees, prefix="/employees", tags=["employees"])
api_router.include_router(records.groups, prefix="/groups", tags=["groups"])
api_router.include_router(records.travels, prefix="/travels", tags=["travels"])
api_router.include_router(records.drivers, prefix="/drivers", tags=["drivers"])
api_router.include_router(records.debts, prefix="/debts", tags=["debts"])
api_router.include_router(records.expenses, prefix="/expenses", tags=["expenses"])
api_router.include_router(records.lands, prefix="/lands", tags=["lookups"])
api_router.include_router(records.plates, prefix="/plates", tags=["lookups"])
api_router.include_router(records.destinations, prefix="/destinations", tags=["lookups"])
api_router.include_router(loans.router, prefix="/loans", tags=["loans"])
api_router.include_router(computations.router, prefix="/computations", tags=["computations"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
