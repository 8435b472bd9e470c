"""
Aggregation engine - folds per-travel financials into dashboard and report
figures.

Every function here is pure: it reads the record lists it is given and
returns fresh view models. Callers recompute on every data change.
"""

from collections import OrderedDict
from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from farmledger.models.debt import Debt
from farmledger.models.employee import Driver, Employee, EmployeeType
from farmledger.models.expense import OtherExpense
from farmledger.models.group import Group
from farmledger.models.lookup import Destination, Land
from farmledger.models.travel import Travel
from farmledger.schemas.analytics import (
    CategoryDistribution,
    DebtStatus,
    DriverHistory,
    EarningsReport,
    EarningsTotals,
    EmployeeEarningsRow,
    GlobalStats,
    TimeSeriesPoint,
    TonnagePoint,
    TravelSummary,
    TravelSummaryRow,
    TravelSummaryTotals,
)
from farmledger.services.financials import TravelContext, index_by_id, trip_wage
from farmledger.utils.dates import format_day, format_week, travel_date, week_start

UNKNOWN = "Unknown"

# Chart colours, assigned in order of first occurrence
PALETTE = ["#778873", "#A1BC98", "#D2DCB6", "#E5ECD0", "#F87171"]


class TravelFilter(BaseModel):
    """Narrows the travels a report is computed over. Empty fields match all."""
    group_ids: List[str] = []
    land: Optional[str] = None
    destination: Optional[str] = None
    plate_number: Optional[str] = None
    driver: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    def matches(self, travel: Travel) -> bool:
        if self.group_ids and travel.group_id not in self.group_ids:
            return False
        if self.land and travel.land != self.land:
            return False
        if self.destination and travel.destination != self.destination:
            return False
        if self.plate_number and travel.plate_number != self.plate_number:
            return False
        if self.driver and travel.driver != self.driver:
            return False
        if self.date_from or self.date_to:
            day = travel_date(travel.date, travel.name)
            if day is None:
                return False
            if self.date_from and day < self.date_from:
                return False
            if self.date_to and day > self.date_to:
                return False
        return True

    def apply(self, travels: Iterable[Travel]) -> List[Travel]:
        return [t for t in travels if self.matches(t)]


def unpaid_debt_by_employee(debts: Iterable[Debt]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for debt in debts:
        if not debt.paid:
            totals[debt.employee_id] = totals.get(debt.employee_id, 0.0) + debt.amount
    return totals


# --- Global stats ----------------------------------------------------------

def global_stats(
    travels: Sequence[Travel],
    groups: Sequence[Group],
    employees: Sequence[Employee],
    debts: Sequence[Debt],
    drivers: Sequence[Driver] = ()
) -> GlobalStats:
    ctx = TravelContext(employees, groups, drivers)

    total_revenue = 0.0
    total_tons = 0.0
    for travel in travels:
        total_revenue += ctx.resolve(travel).total_income
        total_tons += travel.tons

    return GlobalStats(
        total_revenue=total_revenue,
        total_tons=total_tons,
        unpaid_debts=sum(d.amount for d in debts if not d.paid),
        total_employees=len(employees),
        active_groups=len(groups),
    )


# --- Time series -----------------------------------------------------------

def _bucket_series(
    travels: Iterable[Travel],
    ctx: TravelContext,
    bucket_of: Callable[[date], date],
    label_of: Callable[[date], str],
    keep: Callable[[date], bool] = lambda day: True
) -> List[TimeSeriesPoint]:
    buckets: Dict[date, List[float]] = {}
    for travel in travels:
        day = travel_date(travel.date, travel.name)
        if day is None or not keep(day):
            continue
        start = bucket_of(day)
        financials = ctx.resolve(travel)
        income_expense = buckets.setdefault(start, [0.0, 0.0])
        income_expense[0] += financials.total_income
        income_expense[1] += financials.total_expenses

    return [
        TimeSeriesPoint(
            label=label_of(start),
            start=start,
            income=income,
            expense=expense,
            profit=income - expense,
        )
        for start, (income, expense) in sorted(buckets.items())
    ]


def weekly_series(
    travels: Iterable[Travel],
    ctx: TravelContext,
    today: Optional[date] = None
) -> List[TimeSeriesPoint]:
    """Income vs expense per Monday-start week of the current year."""
    year = (today or date.today()).year

    def in_current_year(day: date) -> bool:
        # Weeks straddling New Year only count this year's days
        return day.year == year

    return _bucket_series(travels, ctx, week_start, format_week, in_current_year)


def daily_series(travels: Iterable[Travel], ctx: TravelContext) -> List[TimeSeriesPoint]:
    """Income vs expense per calendar day, across all years."""
    return _bucket_series(travels, ctx, lambda day: day, format_day)


def daily_tonnage(travels: Iterable[Travel]) -> List[TonnagePoint]:
    tons_by_day: Dict[date, float] = {}
    for travel in travels:
        day = travel_date(travel.date, travel.name)
        if day is None:
            continue
        tons_by_day[day] = tons_by_day.get(day, 0.0) + travel.tons

    return [
        TonnagePoint(label=f"{day:%b} {day.day}", start=day, tons=tons)
        for day, tons in sorted(tons_by_day.items())
    ]


# --- Distributions ---------------------------------------------------------

def distribution(labels: Iterable[str]) -> List[CategoryDistribution]:
    """Count occurrences per label, coloured in first-seen order."""
    counts: "OrderedDict[str, int]" = OrderedDict()
    for label in labels:
        counts[label] = counts.get(label, 0) + 1

    return [
        CategoryDistribution(name=name, value=count, color=PALETTE[idx % len(PALETTE)])
        for idx, (name, count) in enumerate(counts.items())
    ]


def _name_of(records_by_id: Mapping, record_id: str, default: str = UNKNOWN) -> str:
    record = records_by_id.get(record_id)
    return record.name if record is not None else default


def land_distribution(travels: Iterable[Travel], lands: Iterable[Land]) -> List[CategoryDistribution]:
    lands_by_id = index_by_id(lands)
    return distribution(_name_of(lands_by_id, t.land) for t in travels)


def destination_distribution(
    travels: Iterable[Travel],
    destinations: Iterable[Destination]
) -> List[CategoryDistribution]:
    destinations_by_id = index_by_id(destinations)
    return distribution(_name_of(destinations_by_id, t.destination, t.destination) for t in travels)


def group_distribution(travels: Iterable[Travel], groups: Iterable[Group]) -> List[CategoryDistribution]:
    groups_by_id = index_by_id(groups)
    return distribution(_name_of(groups_by_id, t.group_id) for t in travels)


def expense_breakdown(
    travels: Iterable[Travel],
    ctx: TravelContext,
    other_expenses: Iterable[OtherExpense] = ()
) -> List[CategoryDistribution]:
    """Where the money went: wages, tips, driver pay, operations."""
    wages = tips = driver_wages = travel_ops = 0.0
    for travel in travels:
        financials = ctx.resolve(travel)
        wages += financials.wage_pot
        tips += financials.driver_tip
        driver_wages += financials.driver_wage_left
        travel_ops += financials.other_expenses

    slices = [
        ("Wages", wages),
        ("Tips", tips),
        ("Driver Wages", driver_wages),
        ("Operations", travel_ops + sum(e.amount for e in other_expenses)),
    ]
    return [
        CategoryDistribution(name=name, value=value, color=PALETTE[idx % len(PALETTE)])
        for idx, (name, value) in enumerate(slices)
        if value > 0
    ]


def group_performance(
    travels: Iterable[Travel],
    groups: Sequence[Group],
    limit: int = 5
) -> List[CategoryDistribution]:
    """Tons hauled per group, best first."""
    tons_by_group: Dict[str, float] = {g.id: 0.0 for g in groups}
    for travel in travels:
        if travel.group_id in tons_by_group:
            tons_by_group[travel.group_id] += travel.tons

    names = {g.id: g.name for g in groups}
    ranked = sorted(tons_by_group.items(), key=lambda item: item[1], reverse=True)[:limit]
    return [
        CategoryDistribution(name=names[group_id], value=tons, color=PALETTE[idx % len(PALETTE)])
        for idx, (group_id, tons) in enumerate(ranked)
    ]


# --- Earnings --------------------------------------------------------------

def _days_absent(employee: Employee, travels: Sequence[Travel], groups: Iterable[Group]) -> int:
    """Travels made by one of the employee's groups without them present."""
    if employee.type == EmployeeType.DRIVER:
        return 0
    group_ids = {g.id for g in groups if employee.id in g.employees}
    if not group_ids:
        return 0
    return sum(
        1 for t in travels
        if t.group_id in group_ids and not t.is_present(employee.id)
    )


def employee_earnings_report(
    employees: Sequence[Employee],
    travels: Sequence[Travel],
    ctx: TravelContext,
    debts: Iterable[Debt] = (),
    include_idle: bool = False
) -> List[EmployeeEarningsRow]:
    """
    Days worked, wages earned and unpaid debt per employee.

    Staff earn their share of each travel's wage pot; drivers earn base pay
    minus tip per trip. Rows with no work and no debt are dropped unless
    ``include_idle``. Sorted by total wage, highest first.
    """
    unpaid = unpaid_debt_by_employee(debts)
    groups = list(ctx.groups_by_id.values())

    rows = []
    for employee in employees:
        days_worked = 0
        total_wage = 0.0
        for travel in travels:
            earned = trip_wage(employee, travel, ctx)
            if earned is None:
                continue
            days_worked += 1
            total_wage += earned

        row = EmployeeEarningsRow(
            employee_id=employee.id,
            name=employee.name,
            type=employee.type,
            days_worked=days_worked,
            days_absent=_days_absent(employee, travels, groups),
            total_wage=total_wage,
            unpaid_debt=unpaid.get(employee.id, 0.0),
        )
        if include_idle or row.days_worked > 0 or row.unpaid_debt > 0:
            rows.append(row)

    rows.sort(key=lambda r: r.total_wage, reverse=True)
    return rows


def group_earnings_report(
    group: Group,
    employees: Sequence[Employee],
    travels: Sequence[Travel],
    ctx: TravelContext,
    debts: Iterable[Debt] = ()
) -> List[EmployeeEarningsRow]:
    """Earnings of every member of ``group``, idle members at zero.

    Members whose employee record is gone are reported as Unknown helpers.
    """
    employees_by_id = index_by_id(employees)
    members = [
        employees_by_id.get(member_id)
        or Employee(id=member_id, name=UNKNOWN, type=EmployeeType.HELPER)
        for member_id in group.employees
    ]
    return employee_earnings_report(members, travels, ctx, debts, include_idle=True)


def earnings_totals(rows: Iterable[EmployeeEarningsRow]) -> EarningsTotals:
    totals = EarningsTotals()
    for row in rows:
        totals.total_days += row.days_worked
        totals.total_wages += row.total_wage
        totals.total_debts += row.unpaid_debt
    return totals


def earnings_report(rows: List[EmployeeEarningsRow]) -> EarningsReport:
    return EarningsReport(rows=rows, totals=earnings_totals(rows))


# --- Summaries -------------------------------------------------------------

def _sort_key(travel: Travel) -> date:
    return travel_date(travel.date, travel.name) or date.min


def travel_summary(
    travels: Iterable[Travel],
    ctx: TravelContext,
    lands: Iterable[Land] = (),
    destinations: Iterable[Destination] = ()
) -> TravelSummary:
    """Per-travel financial rows, latest first, with running totals."""
    lands_by_id = index_by_id(lands)
    destinations_by_id = index_by_id(destinations)

    rows = []
    totals = TravelSummaryTotals()
    for travel in sorted(travels, key=_sort_key, reverse=True):
        financials = ctx.resolve(travel)
        group = ctx.group_for(travel)
        rows.append(TravelSummaryRow(
            travel_id=travel.id,
            name=travel.name,
            date=travel.date,
            group_name=group.name if group is not None else UNKNOWN,
            land_name=_name_of(lands_by_id, travel.land),
            destination_name=_name_of(destinations_by_id, travel.destination, travel.destination),
            tons=travel.tons,
            financials=financials,
        ))
        totals.count += 1
        totals.tons += travel.tons
        totals.income += financials.total_income
        totals.expenses += financials.total_expenses
        totals.net += financials.net_income

    return TravelSummary(rows=rows, totals=totals)


def driver_history(
    driver_record: Driver,
    employee: Optional[Employee],
    travels: Iterable[Travel]
) -> DriverHistory:
    """Trips driven and pay owed to one driver, latest trip first."""
    trips = sorted(
        (t for t in travels if t.driver == driver_record.employee_id),
        key=_sort_key,
        reverse=True,
    )
    total_base = len(trips) * driver_record.wage
    total_tips = sum(t.driver_tip for t in trips)

    return DriverHistory(
        employee_id=driver_record.employee_id,
        name=employee.name if employee is not None else UNKNOWN,
        base_wage=driver_record.wage,
        trips=len(trips),
        total_base_wage=total_base,
        total_tips=total_tips,
        total_net_pay=total_base - total_tips,
        travel_ids=[t.id for t in trips if t.id is not None],
    )


def debt_status(debts: Iterable[Debt]) -> DebtStatus:
    status = DebtStatus()
    for debt in debts:
        if debt.paid:
            status.paid_count += 1
        else:
            status.unpaid_count += 1
            status.total_unpaid += debt.amount
    return status
