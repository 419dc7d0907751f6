import logging
from datetime import date
from decimal import Decimal

from models.entry import RecurringEntry
from models.frequency import Frequency
from services.events import BalanceChanged, BalanceEvents
from services.ledger_service import Ledger
from services.recurrence import next_occurrence
from utils.currency import format_signed
from utils.date_helpers import ONE_DAY, iter_days

logger = logging.getLogger(__name__)


class CatchUpScheduler:
    """Replays every occurrence that fell due between the last run and now."""

    def __init__(self, events: BalanceEvents | None = None):
        self._events = events
        self.firings = 0

    def catch_up(
        self,
        ledger: Ledger,
        last_opened: date | None,
        now: date,
        opening_balance: Decimal = Decimal("0"),
    ) -> Decimal:
        """
        Walk day by day from the day after last_opened through now, firing each
        due template at most once per day. Returns the balance delta applied
        (positive for incomes, negative for expenses).
        """
        if last_opened is None:
            return Decimal("0")

        delta = Decimal("0")

        for cursor in iter_days(last_opened + ONE_DAY, now):
            fired_today: set[str] = set()
            for template in ledger.templates():
                if template.id in fired_today:
                    continue
                due = template.next_scheduled_date
                if due is None or cursor < due:
                    continue
                delta += self._fire(ledger, template, cursor)
                fired_today.add(template.id)
                if self._events:
                    self._events.publish(BalanceChanged(
                        balance=opening_balance + delta,
                        delta=ledger.sign * template.amount,
                        reason="firing",
                        entry_id=template.id,
                    ))

        pruned = ledger.prune_closed_months(now)
        if pruned:
            logger.debug("Dropped %d settled %s entries from closed months", len(pruned), ledger.kind)
        if delta:
            logger.info("Catch-up applied %s to %s ledger", format_signed(delta), ledger.kind)
        return delta

    def _fire(self, ledger: Ledger, template: RecurringEntry, cursor: date) -> Decimal:
        # A template that fell behind is re-anchored on the cursor.
        following = next_occurrence(template, cursor)
        if following is None or following <= cursor:
            # Not a valid recurring period; stop scheduling rather than loop.
            logger.error("Entry %s does not advance past %s", template.id, template.next_scheduled_date)
            following = None
        ledger.reschedule(template.id, following)
        ledger.add(
            RecurringEntry(
                name=template.name,
                category=template.category,
                amount=template.amount,
                frequency=Frequency.one_time(),
                creation_date=cursor,
                source_id=template.id,
            ),
            persist=False,
        )
        self.firings += 1
        logger.debug("Fired %s '%s' %s on %s", ledger.kind, template.name, template.amount, cursor)
        return ledger.sign * template.amount
