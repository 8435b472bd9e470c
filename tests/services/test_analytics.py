import pytest
from datetime import date
from farmledger.models.debt import Debt
from farmledger.models.employee import EmployeeType
from farmledger.models.expense import OtherExpense
from farmledger.models.group import Group
from farmledger.models.lookup import Destination, Land
from farmledger.models.travel import AttendanceEntry, TravelExpense
from farmledger.services import analytics
from farmledger.services.analytics import PALETTE, TravelFilter
from farmledger.services.financials import TravelContext
from tests.factories import make_travel


@pytest.fixture
def ctx(crew):
    return TravelContext(crew["employees"], [crew["group"]], [crew["driver"]])


@pytest.fixture
def two_travels():
    first = make_travel()
    # Only Ana works the second trip: 5 tons -> 1500 pot, all hers
    second = make_travel(
        id="trv-2",
        name="November 19, 2025",
        date="2025-11-19",
        tons=5,
        bags=200,
        sugarcane_price=40,
        attendance=[AttendanceEntry(employee_id="emp-ana", present=True)],
    )
    return [first, second]


# --- Global stats ----------------------------------------------------------

def test_global_stats(crew, two_travels):
    stats = analytics.global_stats(
        two_travels, [crew["group"]], crew["employees"], crew["debts"], [crew["driver"]]
    )

    assert stats.total_revenue == 13000
    assert stats.total_tons == 15
    assert stats.unpaid_debts == 200
    assert stats.total_employees == 4
    assert stats.active_groups == 1


def test_global_stats_sum_over_partitions(crew, two_travels):
    third = make_travel(id="trv-3", tons=2.5, bags=10, molasses=30, molasses_price=12)
    travels = two_travels + [third]
    args = ([crew["group"]], crew["employees"], crew["debts"], [crew["driver"]])

    whole = analytics.global_stats(travels, *args)
    parts = [analytics.global_stats(part, *args) for part in (travels[:1], travels[1:2], travels[2:])]

    assert whole.total_revenue == pytest.approx(sum(p.total_revenue for p in parts))
    assert whole.total_tons == pytest.approx(sum(p.total_tons for p in parts))


def test_global_stats_empty():
    stats = analytics.global_stats([], [], [], [])

    assert stats.total_revenue == 0
    assert stats.total_tons == 0
    assert stats.unpaid_debts == 0


# --- Time series -----------------------------------------------------------

def test_weekly_series_buckets_by_monday(ctx, two_travels):
    series = analytics.weekly_series(two_travels, ctx, today=date(2025, 12, 1))

    assert len(series) == 1
    week = series[0]
    assert week.start == date(2025, 11, 17)
    assert week.label == "Nov 17 - Nov 23"
    assert week.income == 13000
    assert week.expense == 3500 + (1500 + 50 + 450)
    assert week.profit == week.income - week.expense


def test_weekly_series_keeps_only_current_year(ctx):
    travels = [
        make_travel(id="old", date="2024-06-03"),
        make_travel(id="last-december", date="2024-12-31"),
        make_travel(id="new-year", date="2025-01-02"),  # week starts Dec 30, 2024
        make_travel(id="now", date="2025-03-05"),
    ]

    series = analytics.weekly_series(travels, ctx, today=date(2025, 6, 1))

    assert [p.start for p in series] == [date(2024, 12, 30), date(2025, 3, 3)]
    assert series[0].label == "Dec 30 - Jan 5"
    # Only the January travel counts towards the straddling week
    assert series[0].income == 5000


def test_weekly_series_uses_name_when_date_missing(ctx):
    travels = [
        make_travel(id="named", date=None, name="November 18, 2025"),
        make_travel(id="undated", date=None, name="Trip to the mill"),
    ]

    series = analytics.weekly_series(travels, ctx, today=date(2025, 11, 20))

    assert len(series) == 1
    assert series[0].start == date(2025, 11, 17)
    assert series[0].income == 5000


def test_daily_series_spans_years(ctx):
    travels = [
        make_travel(id="a", date="2024-12-31"),
        make_travel(id="b", date="2025-01-01"),
        make_travel(id="c", date="2025-01-01"),
    ]

    series = analytics.daily_series(travels, ctx)

    assert [p.label for p in series] == ["Dec 31, 2024", "Jan 1, 2025"]
    assert series[1].income == 10000


def test_daily_tonnage(two_travels):
    points = analytics.daily_tonnage(two_travels)

    assert [(p.label, p.tons) for p in points] == [("Nov 17", 10), ("Nov 19", 5)]


# --- Distributions ---------------------------------------------------------

def test_land_distribution_colours_in_first_seen_order():
    travels = [
        make_travel(id="a", land="land-1"),
        make_travel(id="b", land="land-gone"),
        make_travel(id="c", land="land-1"),
    ]

    slices = analytics.land_distribution(travels, [Land(id="land-1", name="Upper Field")])

    assert [(s.name, s.value, s.color) for s in slices] == [
        ("Upper Field", 2, PALETTE[0]),
        ("Unknown", 1, PALETTE[1]),
    ]


def test_destination_distribution_falls_back_to_raw_id():
    travels = [make_travel(id="a", destination="dest-1"), make_travel(id="b", destination="Mill 7")]

    slices = analytics.destination_distribution(travels, [Destination(id="dest-1", name="Central Mill")])

    assert [s.name for s in slices] == ["Central Mill", "Mill 7"]


def test_distribution_palette_wraps():
    slices = analytics.distribution(f"label-{i}" for i in range(len(PALETTE) + 1))

    assert slices[-1].color == PALETTE[0]


def test_expense_breakdown(ctx):
    travel = make_travel(expenses=[TravelExpense(name="Fuel", amount=80)])
    other = [OtherExpense(name="Repairs", amount=20)]

    slices = analytics.expense_breakdown([travel], ctx, other)

    assert [(s.name, s.value) for s in slices] == [
        ("Wages", 3000),
        ("Tips", 50),
        ("Driver Wages", 450),
        ("Operations", 100),
    ]


def test_expense_breakdown_omits_empty_slices(ctx):
    slices = analytics.expense_breakdown([make_travel()], ctx)

    assert "Operations" not in [s.name for s in slices]


def test_group_performance_ranks_by_tons(crew):
    south = Group(id="grp-2", name="South Crew", wage=250)
    travels = [make_travel(id="a"), make_travel(id="b", group_id="grp-2", tons=25)]

    ranked = analytics.group_performance(travels, [crew["group"], south], limit=1)

    assert [(r.name, r.value) for r in ranked] == [("South Crew", 25)]


# --- Earnings --------------------------------------------------------------

def test_employee_earnings_report(crew, ctx, two_travels):
    rows = analytics.employee_earnings_report(crew["employees"], two_travels, ctx, crew["debts"])

    by_name = {r.name: r for r in rows}
    assert [r.name for r in rows] == ["Ana", "Ben", "Dan"]  # idle helper dropped
    assert by_name["Ana"].days_worked == 2
    assert by_name["Ana"].total_wage == 3000
    assert by_name["Ana"].unpaid_debt == 200
    assert by_name["Ben"].total_wage == 1500
    assert by_name["Ben"].days_absent == 1
    assert by_name["Dan"].days_worked == 2
    assert by_name["Dan"].total_wage == 900
    assert by_name["Dan"].days_absent == 0


def test_driver_earnings_go_negative_when_tip_exceeds_base(crew, ctx):
    rows = analytics.employee_earnings_report(crew["employees"], [make_travel(driver_tip=600)], ctx)

    dan = next(r for r in rows if r.type == EmployeeType.DRIVER)
    assert dan.total_wage == -100


def test_staff_share_needs_staff_headcount(crew, ctx):
    travel = make_travel(attendance=[AttendanceEntry(employee_id="emp-hal", present=True)])

    rows = analytics.employee_earnings_report(crew["employees"], [travel], ctx, include_idle=True)

    assert all(r.total_wage == 0 for r in rows if r.type == EmployeeType.STAFF)


def test_debt_only_employee_is_listed(crew, ctx):
    debts = [Debt(employee_id="emp-hal", amount=75)]

    rows = analytics.employee_earnings_report(crew["employees"], [], ctx, debts)

    assert [(r.name, r.unpaid_debt) for r in rows] == [("Hal", 75)]


def test_group_earnings_report_includes_idle_and_orphans(crew, ctx, two_travels):
    group = crew["group"].model_copy(update={"employees": crew["group"].employees + ["emp-gone"]})

    rows = analytics.group_earnings_report(group, crew["employees"], two_travels, ctx, crew["debts"])

    assert [r.name for r in rows] == ["Ana", "Ben", "Hal", "Unknown"]
    assert rows[-1].type == EmployeeType.HELPER
    assert rows[-1].total_wage == 0


def test_earnings_totals(crew, ctx, two_travels):
    rows = analytics.employee_earnings_report(crew["employees"], two_travels, ctx, crew["debts"])

    report = analytics.earnings_report(rows)

    assert report.totals.total_days == 5
    assert report.totals.total_wages == 5400
    assert report.totals.total_debts == 200


# --- Summaries -------------------------------------------------------------

def test_travel_summary_latest_first(ctx, two_travels):
    summary = analytics.travel_summary(two_travels, ctx, [Land(id="land-1", name="Upper Field")])

    assert [r.travel_id for r in summary.rows] == ["trv-2", "trv-1"]
    assert summary.rows[0].group_name == "North Crew"
    assert summary.rows[0].land_name == "Upper Field"
    assert summary.rows[0].destination_name == "dest-1"
    assert summary.totals.count == 2
    assert summary.totals.income == 13000
    assert summary.totals.net == summary.totals.income - summary.totals.expenses


def test_driver_history(crew, two_travels):
    history = analytics.driver_history(crew["driver"], crew["employees"][3], two_travels)

    assert history.name == "Dan"
    assert history.trips == 2
    assert history.total_base_wage == 1000
    assert history.total_tips == 100
    assert history.total_net_pay == 900
    assert history.travel_ids == ["trv-2", "trv-1"]


def test_debt_status(crew):
    status = analytics.debt_status(crew["debts"])

    assert status.paid_count == 1
    assert status.unpaid_count == 1
    assert status.total_unpaid == 200


# --- Filters ---------------------------------------------------------------

def test_travel_filter_by_group_and_dates(two_travels):
    other = make_travel(id="trv-3", group_id="grp-2", date="2025-11-18")
    travels = two_travels + [other]

    assert [t.id for t in TravelFilter(group_ids=["grp-1"]).apply(travels)] == ["trv-1", "trv-2"]
    in_range = TravelFilter(date_from=date(2025, 11, 18), date_to=date(2025, 11, 19)).apply(travels)
    assert [t.id for t in in_range] == ["trv-2", "trv-3"]


def test_empty_filter_matches_everything(two_travels):
    assert TravelFilter().apply(two_travels) == two_travels
