from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field
from farmledger.models.employee import EmployeeType


class TravelFinancials(BaseModel):
    travel_id: Optional[str] = None

    sugar_income: float = 0
    molasses_income: float = 0
    total_income: float = 0

    wage_rate: float = 0
    wage_pot: float = 0
    staff_count: int = 0
    wage_per_staff: float = 0
    present_staff: List[str] = []

    driver_tip: float = 0
    driver_base_wage: float = 0
    driver_wage_left: float = 0

    other_expenses: float = 0
    total_expenses: float = 0
    net_income: float = 0


class GlobalStats(BaseModel):
    total_revenue: float = 0
    total_tons: float = 0
    unpaid_debts: float = 0
    total_employees: int = 0
    active_groups: int = 0


class TimeSeriesPoint(BaseModel):
    label: str
    start: date
    income: float = 0
    expense: float = 0
    profit: float = 0


class TonnagePoint(BaseModel):
    label: str
    start: date
    tons: float = 0


class CategoryDistribution(BaseModel):
    name: str
    value: float
    color: str


class EmployeeEarningsRow(BaseModel):
    employee_id: str
    name: str
    type: EmployeeType
    days_worked: int = 0
    days_absent: int = 0
    total_wage: float = 0
    unpaid_debt: float = 0


class EarningsTotals(BaseModel):
    total_days: int = 0
    total_wages: float = 0
    total_debts: float = 0


class EarningsReport(BaseModel):
    rows: List[EmployeeEarningsRow] = []
    totals: EarningsTotals = Field(default_factory=EarningsTotals)


class TravelSummaryRow(BaseModel):
    travel_id: Optional[str] = None
    name: str
    date: Optional[str] = None
    group_name: str
    land_name: str
    destination_name: str
    tons: float = 0
    financials: TravelFinancials


class TravelSummaryTotals(BaseModel):
    count: int = 0
    tons: float = 0
    income: float = 0
    expenses: float = 0
    net: float = 0


class TravelSummary(BaseModel):
    rows: List[TravelSummaryRow] = []
    totals: TravelSummaryTotals = Field(default_factory=TravelSummaryTotals)


class DriverHistory(BaseModel):
    employee_id: str
    name: str
    base_wage: float = 0
    trips: int = 0
    total_base_wage: float = 0
    total_tips: float = 0
    total_net_pay: float = 0
    travel_ids: List[str] = []


class DebtStatus(BaseModel):
    paid_count: int = 0
    unpaid_count: int = 0
    total_unpaid: float = 0


class DashboardSnapshot(BaseModel):
    """Everything the dashboard shows, computed in one pass over a snapshot."""
    stats: GlobalStats
    weekly: List[TimeSeriesPoint] = []
    tonnage: List[TonnagePoint] = []
    by_land: List[CategoryDistribution] = []
    by_destination: List[CategoryDistribution] = []
    by_group: List[CategoryDistribution] = []
    expense_breakdown: List[CategoryDistribution] = []
    group_performance: List[CategoryDistribution] = []
    earnings: List[EmployeeEarningsRow] = []
    debt_status: DebtStatus = Field(default_factory=DebtStatus)
