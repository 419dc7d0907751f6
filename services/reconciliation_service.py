import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal

from models.entry import RecurringEntry
from models.frequency import Frequency
from models.run_state import RunState
from services.ledger_service import Ledger
from utils.constants import BUDGET_ENTRY_NAME, MONTHLY_BUDGET_CATEGORY
from utils.date_helpers import month_name, same_month

logger = logging.getLogger(__name__)


@dataclass
class Reconciliation:
    state: RunState
    new_balance: Decimal
    did_reset: bool = False
    archived_ids: list[str] = field(default_factory=list)


class ReconciliationService:
    """Month rollover: reset the balance to the new budget and archive last month."""

    def __init__(self, incomes: Ledger, expenses: Ledger):
        self._incomes = incomes
        self._expenses = expenses

    def reconcile(self, state: RunState, now: date) -> Reconciliation:
        """
        Reset once per calendar month. The caller's state is not modified; the
        returned state always carries last_opened_date = now.
        """
        new_state = replace(state)
        result = Reconciliation(state=new_state, new_balance=state.balance)

        if self._needs_reset(state, now):
            new_balance = self._next_budget(new_state)

            new_state.balance = new_balance
            new_state.starting_budget_of_month = new_balance
            new_state.last_reset_month = now.month
            new_state.has_launched_before = True

            for ledger in (self._incomes, self._expenses):
                archived = ledger.archive_and_remove_stale(now)
                result.archived_ids.extend(e.id for e in archived)

            self._incomes.add(RecurringEntry(
                name=BUDGET_ENTRY_NAME.format(month=month_name(now)),
                category=MONTHLY_BUDGET_CATEGORY,
                amount=max(new_balance, Decimal("0")),
                frequency=Frequency.one_time(),
                creation_date=now,
            ))
            self._expenses.save()
            result.new_balance = new_balance
            result.did_reset = True
            logger.info(
                "Monthly reset for %s: balance %s, %d entries archived",
                month_name(now), new_balance, len(result.archived_ids),
            )

        new_state.last_opened_date = now
        return result

    def _needs_reset(self, state: RunState, now: date) -> bool:
        if state.last_opened_date is None or same_month(state.last_opened_date, now):
            return False
        if state.last_reset_month == now.month:
            logger.debug("Already reset for month %d", now.month)
            return False
        return True

    def _next_budget(self, state: RunState) -> Decimal:
        """Next-month override (consumed), else the latest monthly budget, else unchanged."""
        if state.next_month_budget is not None:
            budget = state.next_month_budget
            state.next_month_budget = None
            return budget
        latest = self._incomes.latest_in_category(MONTHLY_BUDGET_CATEGORY)
        if latest is not None:
            return latest.amount
        logger.warning("No monthly budget on record; keeping balance %s", state.balance)
        return state.balance
