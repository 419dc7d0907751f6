import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from models.frequency import Frequency
from utils.date_helpers import month_key


def new_entry_id() -> str:
    return uuid.uuid4().hex


@dataclass
class RecurringEntry:
    name: str
    category: str
    amount: Decimal             # magnitude only; the ledger decides the sign
    frequency: Frequency
    creation_date: date
    next_scheduled_date: Optional[date] = None
    is_archived: bool = False
    source_id: Optional[str] = None   # template id, set on firing records
    id: str = field(default_factory=new_entry_id)

    @property
    def is_template(self) -> bool:
        """A recurring entry that keeps firing (firing records never do)."""
        return self.frequency.is_recurring and self.source_id is None

    @property
    def month_key(self) -> tuple[int, int]:
        return month_key(self.creation_date)

    def is_settled(self, now: date) -> bool:
        """True when the entry has no occurrence left to fire.

        Templates always have one more; one-time entries and firing records
        had their effect applied when they were recorded.
        """
        if self.is_template:
            return False
        return self.next_scheduled_date is None or self.next_scheduled_date <= now
