from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta

from utils.constants import DATE_FORMAT

ONE_DAY = timedelta(days=1)

# Calendar units accepted by advance(); values are relativedelta keywords.
UNITS = {
    "day": "days",
    "week": "weeks",
    "month": "months",
    "year": "years",
}


def today() -> date:
    return date.today()


def parse_date(date_str: str | None) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in (DATE_FORMAT, "%Y-%m-%dT%H:%M:%S", "%Y/%m/%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def month_key(d: date) -> tuple[int, int]:
    """(year, month) bucket a date belongs to."""
    return (d.year, d.month)


def same_month(a: date, b: date) -> bool:
    return month_key(a) == month_key(b)


def month_name(d: date) -> str:
    """English month name, e.g. 'November'."""
    return d.strftime("%B")


def advance(d: date, unit: str, count: int = 1) -> date:
    """Add `count` calendar units to d.

    Month and year steps clamp to the end of shorter months, so Jan 31 plus one
    month is Feb 28 (or 29).
    """
    try:
        keyword = UNITS[unit]
    except KeyError:
        raise ValueError(f"Unknown calendar unit: {unit}") from None
    return d + relativedelta(**{keyword: count})


def iter_days(start: date, end: date):
    """Yield each day from start through end inclusive."""
    current = start
    while current <= end:
        yield current
        current += ONE_DAY
