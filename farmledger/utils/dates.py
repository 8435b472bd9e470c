"""Calendar helpers for bucketing travels.

Travel dates are ``YYYY-MM-DD`` strings entered by hand. They are read as
plain calendar dates; no timezone is involved, so a travel never shifts to
the previous day.
"""
from datetime import date, datetime, timedelta
from typing import Optional

# Travels are often named after their date, e.g. "November 17, 2025"
NAME_DATE_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%Y-%m-%d", "%m/%d/%Y")


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def parse_name_date(name: Optional[str]) -> Optional[date]:
    if not name:
        return None
    for fmt in NAME_DATE_FORMATS:
        try:
            return datetime.strptime(name.strip(), fmt).date()
        except ValueError:
            continue
    return None


def travel_date(date_value: Optional[str], name: Optional[str] = None) -> Optional[date]:
    """Calendar date of a travel: the date field, else a date-like name."""
    return parse_iso_date(date_value) or parse_name_date(name)


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def format_day(day: date) -> str:
    """e.g. ``Oct 12, 2025``"""
    return f"{day:%b} {day.day}, {day.year}"


def format_week(start: date) -> str:
    """e.g. ``Oct 13 - Oct 19``"""
    end = start + timedelta(days=6)
    return f"{start:%b} {start.day} - {end:%b} {end.day}"
