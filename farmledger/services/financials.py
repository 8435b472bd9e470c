"""
Travel financials - income, wages and net profit of a single travel.

Algorithm (per travel):
1. Income: sugarcane price x bags + molasses price x molasses
2. Wage pot: tons x group wage rate, split evenly among present Staff
3. Driver: the tip is paid out of the driver's flat base pay; whatever is left
   of the base (never below zero) is paid as well
4. Expenses: wage pot + tip + driver wage left + travel expenses
5. Net: income - expenses

Referenced employees, groups and drivers may have been deleted; missing ones
contribute nothing and never raise.
"""

from typing import Callable, Dict, Iterable, List, Mapping, Optional, TypeVar

from farmledger.models.employee import Driver, Employee, EmployeeType
from farmledger.models.group import Group
from farmledger.models.travel import Travel
from farmledger.schemas.analytics import TravelFinancials

T = TypeVar("T")


def index_by_id(records: Iterable[T]) -> Dict[str, T]:
    return {r.id: r for r in records if r.id is not None}


def present_staff(travel: Travel, employees_by_id: Mapping[str, Employee]) -> List[str]:
    """Ids of attendees marked present whose employee is Staff."""
    staff = []
    for entry in travel.attendance:
        if not entry.present:
            continue
        employee = employees_by_id.get(entry.employee_id)
        if employee is not None and employee.type == EmployeeType.STAFF:
            staff.append(entry.employee_id)
    return staff


def resolve_travel(
    travel: Travel,
    group: Optional[Group],
    driver_record: Optional[Driver],
    employees_by_id: Mapping[str, Employee]
) -> TravelFinancials:
    sugar_income = travel.sugarcane_price * travel.bags
    molasses_income = travel.molasses_price * travel.molasses
    total_income = sugar_income + molasses_income

    wage_rate = group.wage if group is not None else 0
    wage_pot = travel.tons * wage_rate

    staff = present_staff(travel, employees_by_id)
    wage_per_staff = wage_pot / len(staff) if staff else 0

    driver_tip = travel.driver_tip
    driver_base_wage = driver_record.wage if driver_record is not None else 0
    # A tip larger than the base pay must not produce a negative expense
    driver_wage_left = max(0, driver_base_wage - driver_tip)

    other_expenses = sum(e.amount for e in travel.expenses)
    total_expenses = wage_pot + driver_tip + driver_wage_left + other_expenses

    return TravelFinancials(
        travel_id=travel.id,
        sugar_income=sugar_income,
        molasses_income=molasses_income,
        total_income=total_income,
        wage_rate=wage_rate,
        wage_pot=wage_pot,
        staff_count=len(staff),
        wage_per_staff=wage_per_staff,
        present_staff=staff,
        driver_tip=driver_tip,
        driver_base_wage=driver_base_wage,
        driver_wage_left=driver_wage_left,
        other_expenses=other_expenses,
        total_expenses=total_expenses,
        net_income=total_income - total_expenses,
    )


class TravelContext:
    """Lookup tables needed to resolve travels, built once per snapshot.

    Resolved financials are memoised per travel id.
    """

    def __init__(
        self,
        employees: Iterable[Employee] = (),
        groups: Iterable[Group] = (),
        drivers: Iterable[Driver] = ()
    ):
        self.employees_by_id = index_by_id(employees)
        self.groups_by_id = index_by_id(groups)
        self.drivers_by_employee = {d.employee_id: d for d in drivers}
        self._resolved: Dict[object, TravelFinancials] = {}

    def group_for(self, travel: Travel) -> Optional[Group]:
        return self.groups_by_id.get(travel.group_id)

    def driver_for(self, travel: Travel) -> Optional[Driver]:
        return self.drivers_by_employee.get(travel.driver)

    def resolve(self, travel: Travel) -> TravelFinancials:
        key = travel.id if travel.id is not None else id(travel)
        if key not in self._resolved:
            self._resolved[key] = resolve_travel(
                travel,
                self.group_for(travel),
                self.driver_for(travel),
                self.employees_by_id,
            )
        return self._resolved[key]


# --- Per-employee earnings -------------------------------------------------
#
# Each rule returns what the employee earned on one travel, or None when the
# employee did not work it.

WageRule = Callable[[Employee, Travel, TravelContext], Optional[float]]


def _staff_trip_wage(employee: Employee, travel: Travel, ctx: TravelContext) -> Optional[float]:
    if not travel.is_present(employee.id) or ctx.group_for(travel) is None:
        return None
    financials = ctx.resolve(travel)
    if financials.staff_count <= 0:
        return None
    return financials.wage_per_staff


def _driver_trip_wage(employee: Employee, travel: Travel, ctx: TravelContext) -> Optional[float]:
    if travel.driver != employee.id:
        return None
    driver_record = ctx.driver_for(travel)
    base = driver_record.wage if driver_record is not None else 0
    # Net driver earnings: not clamped, unlike the expense view's wage left
    return base - travel.driver_tip


def _helper_trip_wage(employee: Employee, travel: Travel, ctx: TravelContext) -> Optional[float]:
    return None


WAGE_RULES: Dict[EmployeeType, WageRule] = {
    EmployeeType.STAFF: _staff_trip_wage,
    EmployeeType.DRIVER: _driver_trip_wage,
    EmployeeType.HELPER: _helper_trip_wage,
}

_unruled = set(EmployeeType) - set(WAGE_RULES)
if _unruled:
    raise RuntimeError(f"No wage rule for employee types: {sorted(t.value for t in _unruled)}")


def trip_wage(employee: Employee, travel: Travel, ctx: TravelContext) -> Optional[float]:
    """Earnings of ``employee`` on ``travel`` according to their type."""
    return WAGE_RULES[employee.type](employee, travel, ctx)
