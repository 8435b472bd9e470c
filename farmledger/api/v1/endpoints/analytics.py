from typing import List, Literal, Optional
from fastapi import APIRouter, Depends, HTTPException

from farmledger.api.deps import get_farm_id, get_travel_filter
from farmledger.schemas.analytics import (
    CategoryDistribution,
    DashboardSnapshot,
    DebtStatus,
    DriverHistory,
    EarningsReport,
    GlobalStats,
    TimeSeriesPoint,
    TonnagePoint,
    TravelFinancials,
    TravelSummary,
)
from farmledger.services.analytics import TravelFilter
from farmledger.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("/dashboard", response_model=DashboardSnapshot)
async def dashboard(
    travel_filter: TravelFilter = Depends(get_travel_filter),
    farm_id: Optional[str] = Depends(get_farm_id)
):
    return await AnalyticsService.dashboard(travel_filter, farm_id)


@router.get("/stats", response_model=GlobalStats)
async def stats(
    travel_filter: TravelFilter = Depends(get_travel_filter),
    farm_id: Optional[str] = Depends(get_farm_id)
):
    return await AnalyticsService.global_stats(travel_filter, farm_id)


@router.get("/weekly", response_model=List[TimeSeriesPoint])
async def weekly(
    travel_filter: TravelFilter = Depends(get_travel_filter),
    farm_id: Optional[str] = Depends(get_farm_id)
):
    """Income vs expense per week of the current year"""
    return await AnalyticsService.weekly(travel_filter, farm_id)


@router.get("/daily", response_model=List[TimeSeriesPoint])
async def daily(
    travel_filter: TravelFilter = Depends(get_travel_filter),
    farm_id: Optional[str] = Depends(get_farm_id)
):
    return await AnalyticsService.daily(travel_filter, farm_id)


@router.get("/tonnage", response_model=List[TonnagePoint])
async def tonnage(
    travel_filter: TravelFilter = Depends(get_travel_filter),
    farm_id: Optional[str] = Depends(get_farm_id)
):
    return await AnalyticsService.tonnage(travel_filter, farm_id)


@router.get("/distribution/{by}", response_model=List[CategoryDistribution])
async def distribution(
    by: Literal["land", "destination", "group"],
    travel_filter: TravelFilter = Depends(get_travel_filter),
    farm_id: Optional[str] = Depends(get_farm_id)
):
    """Travel counts per land, destination or group"""
    return await AnalyticsService.distribution(by, travel_filter, farm_id)


@router.get("/expense-breakdown", response_model=List[CategoryDistribution])
async def expense_breakdown(
    travel_filter: TravelFilter = Depends(get_travel_filter),
    farm_id: Optional[str] = Depends(get_farm_id)
):
    return await AnalyticsService.expense_breakdown(travel_filter, farm_id)


@router.get("/group-performance", response_model=List[CategoryDistribution])
async def group_performance(
    limit: int = 5,
    travel_filter: TravelFilter = Depends(get_travel_filter),
    farm_id: Optional[str] = Depends(get_farm_id)
):
    return await AnalyticsService.group_performance(travel_filter, farm_id, limit=limit)


@router.get("/earnings", response_model=EarningsReport)
async def earnings(
    include_idle: bool = False,
    travel_filter: TravelFilter = Depends(get_travel_filter),
    farm_id: Optional[str] = Depends(get_farm_id)
):
    """Days worked, wages and unpaid debt per employee"""
    return await AnalyticsService.earnings(travel_filter, farm_id, include_idle=include_idle)


@router.get("/earnings/groups/{group_id}", response_model=EarningsReport)
async def group_earnings(
    group_id: str,
    travel_filter: TravelFilter = Depends(get_travel_filter),
    farm_id: Optional[str] = Depends(get_farm_id)
):
    report = await AnalyticsService.group_earnings(group_id, travel_filter, farm_id)
    if report is None:
        raise HTTPException(status_code=404, detail="Group not found")
    return report


@router.get("/travels/summary", response_model=TravelSummary)
async def travel_summary(
    travel_filter: TravelFilter = Depends(get_travel_filter),
    farm_id: Optional[str] = Depends(get_farm_id)
):
    return await AnalyticsService.travel_summary(travel_filter, farm_id)


@router.get("/travels/{travel_id}", response_model=TravelFinancials)
async def travel_financials(travel_id: str, farm_id: Optional[str] = Depends(get_farm_id)):
    """Income, wages and net profit of one travel"""
    financials = await AnalyticsService.travel_financials(travel_id, farm_id)
    if financials is None:
        raise HTTPException(status_code=404, detail="Travel not found")
    return financials


@router.get("/drivers/{employee_id}", response_model=DriverHistory)
async def driver_history(employee_id: str, farm_id: Optional[str] = Depends(get_farm_id)):
    history = await AnalyticsService.driver_history(employee_id, farm_id)
    if history is None:
        raise HTTPException(status_code=404, detail="Driver not found")
    return history


@router.get("/debts", response_model=DebtStatus)
async def debt_status(farm_id: Optional[str] = Depends(get_farm_id)):
    return await AnalyticsService.debt_status(farm_id)
