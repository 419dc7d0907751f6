from datetime import date

from models.entry import RecurringEntry
from models.frequency import FIXED_UNITS, Frequency, FrequencyKind
from utils.date_helpers import advance


def step(d: date, frequency: Frequency) -> date | None:
    """Return d moved forward by one period of `frequency`, None for one-time.

    Custom periods compose their offsets in a fixed order: days, then months,
    then years, skipping zero components.
    """
    if frequency.kind is FrequencyKind.ONE_TIME:
        return None
    if frequency.kind is FrequencyKind.CUSTOM:
        result = d
        if frequency.days:
            result = advance(result, "day", frequency.days)
        if frequency.months:
            result = advance(result, "month", frequency.months)
        if frequency.years:
            result = advance(result, "year", frequency.years)
        return result
    return advance(d, FIXED_UNITS[frequency.kind], 1)


def next_occurrence(entry: RecurringEntry, from_date: date | None = None) -> date | None:
    """The occurrence after the entry's current next date, or after from_date.

    An entry without a next date yet is measured from its creation date.
    """
    base = from_date or entry.next_scheduled_date or entry.creation_date
    return step(base, entry.frequency)


def initial_scheduled_date(entry: RecurringEntry) -> date | None:
    """First due date of a freshly created entry: one period after creation."""
    return step(entry.creation_date, entry.frequency)
