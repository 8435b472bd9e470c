"""
Loads a farm snapshot and runs the aggregation engine over it.

Every call reads all collections afresh; nothing is cached between requests.
"""

import asyncio
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from farmledger.db.session import get_database
from farmledger.models.debt import Debt
from farmledger.models.employee import Driver, Employee
from farmledger.models.expense import OtherExpense
from farmledger.models.group import Group
from farmledger.models.lookup import Destination, Land
from farmledger.models.travel import Travel
from farmledger.repositories.farm_store import FarmStore
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
from farmledger.services import analytics
from farmledger.services.analytics import TravelFilter
from farmledger.services.financials import TravelContext


@dataclass
class FarmSnapshot:
    employees: List[Employee]
    groups: List[Group]
    travels: List[Travel]
    drivers: List[Driver]
    debts: List[Debt]
    expenses: List[OtherExpense]
    lands: List[Land]
    destinations: List[Destination]

    def context(self) -> TravelContext:
        return TravelContext(self.employees, self.groups, self.drivers)


async def load_snapshot(farm_id: Optional[str] = None) -> FarmSnapshot:
    db = await get_database()
    store = FarmStore(db, farm_id)
    results = await asyncio.gather(
        store.employees.list(),
        store.groups.list(),
        store.travels.list(),
        store.drivers.list(),
        store.debts.list(),
        store.expenses.list(),
        store.lands.list(),
        store.destinations.list(),
    )
    return FarmSnapshot(*results)


class AnalyticsService:
    @staticmethod
    async def travel_financials(travel_id: str, farm_id: Optional[str] = None) -> Optional[TravelFinancials]:
        snapshot = await load_snapshot(farm_id)
        for travel in snapshot.travels:
            if travel.id == travel_id:
                return snapshot.context().resolve(travel)
        return None

    @staticmethod
    async def global_stats(travel_filter: TravelFilter, farm_id: Optional[str] = None) -> GlobalStats:
        s = await load_snapshot(farm_id)
        return analytics.global_stats(travel_filter.apply(s.travels), s.groups, s.employees, s.debts, s.drivers)

    @staticmethod
    async def weekly(
        travel_filter: TravelFilter,
        farm_id: Optional[str] = None,
        today: Optional[date] = None
    ) -> List[TimeSeriesPoint]:
        s = await load_snapshot(farm_id)
        return analytics.weekly_series(travel_filter.apply(s.travels), s.context(), today=today)

    @staticmethod
    async def daily(travel_filter: TravelFilter, farm_id: Optional[str] = None) -> List[TimeSeriesPoint]:
        s = await load_snapshot(farm_id)
        return analytics.daily_series(travel_filter.apply(s.travels), s.context())

    @staticmethod
    async def tonnage(travel_filter: TravelFilter, farm_id: Optional[str] = None) -> List[TonnagePoint]:
        s = await load_snapshot(farm_id)
        return analytics.daily_tonnage(travel_filter.apply(s.travels))

    @staticmethod
    async def distribution(
        by: str,
        travel_filter: TravelFilter,
        farm_id: Optional[str] = None
    ) -> List[CategoryDistribution]:
        """Travel counts per land, destination or group."""
        s = await load_snapshot(farm_id)
        travels = travel_filter.apply(s.travels)
        if by == "land":
            return analytics.land_distribution(travels, s.lands)
        if by == "destination":
            return analytics.destination_distribution(travels, s.destinations)
        if by == "group":
            return analytics.group_distribution(travels, s.groups)
        raise ValueError(f"Unknown distribution: {by}")

    @staticmethod
    async def expense_breakdown(travel_filter: TravelFilter, farm_id: Optional[str] = None) -> List[CategoryDistribution]:
        s = await load_snapshot(farm_id)
        return analytics.expense_breakdown(travel_filter.apply(s.travels), s.context(), s.expenses)

    @staticmethod
    async def group_performance(
        travel_filter: TravelFilter,
        farm_id: Optional[str] = None,
        limit: int = 5
    ) -> List[CategoryDistribution]:
        s = await load_snapshot(farm_id)
        return analytics.group_performance(travel_filter.apply(s.travels), s.groups, limit=limit)

    @staticmethod
    async def earnings(
        travel_filter: TravelFilter,
        farm_id: Optional[str] = None,
        include_idle: bool = False
    ) -> EarningsReport:
        s = await load_snapshot(farm_id)
        rows = analytics.employee_earnings_report(
            s.employees, travel_filter.apply(s.travels), s.context(), s.debts, include_idle=include_idle
        )
        return analytics.earnings_report(rows)

    @staticmethod
    async def group_earnings(
        group_id: str,
        travel_filter: TravelFilter,
        farm_id: Optional[str] = None
    ) -> Optional[EarningsReport]:
        s = await load_snapshot(farm_id)
        group = next((g for g in s.groups if g.id == group_id), None)
        if group is None:
            return None
        rows = analytics.group_earnings_report(
            group, s.employees, travel_filter.apply(s.travels), s.context(), s.debts
        )
        return analytics.earnings_report(rows)

    @staticmethod
    async def travel_summary(travel_filter: TravelFilter, farm_id: Optional[str] = None) -> TravelSummary:
        s = await load_snapshot(farm_id)
        return analytics.travel_summary(travel_filter.apply(s.travels), s.context(), s.lands, s.destinations)

    @staticmethod
    async def driver_history(employee_id: str, farm_id: Optional[str] = None) -> Optional[DriverHistory]:
        s = await load_snapshot(farm_id)
        driver_record = next((d for d in s.drivers if d.employee_id == employee_id), None)
        if driver_record is None:
            return None
        employee = next((e for e in s.employees if e.id == employee_id), None)
        return analytics.driver_history(driver_record, employee, s.travels)

    @staticmethod
    async def debt_status(farm_id: Optional[str] = None) -> DebtStatus:
        s = await load_snapshot(farm_id)
        return analytics.debt_status(s.debts)

    @staticmethod
    async def dashboard(
        travel_filter: TravelFilter,
        farm_id: Optional[str] = None,
        today: Optional[date] = None
    ) -> DashboardSnapshot:
        """All dashboard figures from a single snapshot."""
        s = await load_snapshot(farm_id)
        ctx = s.context()
        travels = travel_filter.apply(s.travels)
        return DashboardSnapshot(
            stats=analytics.global_stats(travels, s.groups, s.employees, s.debts, s.drivers),
            weekly=analytics.weekly_series(travels, ctx, today=today),
            tonnage=analytics.daily_tonnage(travels),
            by_land=analytics.land_distribution(travels, s.lands),
            by_destination=analytics.destination_distribution(travels, s.destinations),
            by_group=analytics.group_distribution(travels, s.groups),
            expense_breakdown=analytics.expense_breakdown(travels, ctx, s.expenses),
            group_performance=analytics.group_performance(travels, s.groups),
            earnings=analytics.employee_earnings_report(s.employees, travels, ctx, s.debts),
            debt_status=analytics.debt_status(s.debts),
        )
