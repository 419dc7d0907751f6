import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal

from database.run_state_dao import RunStateDAO
from models.entry import RecurringEntry
from models.frequency import Frequency
from models.run_state import RunState
from services.events import BalanceChanged, BalanceEvents
from services.ledger_service import Ledger
from services.recurrence import initial_scheduled_date
from utils.constants import BUDGET_ENTRY_NAME, MONTHLY_BUDGET_CATEGORY
from utils.currency import parse_amount
from utils.date_helpers import month_name, today
from utils.errors import PersistenceFailure

logger = logging.getLogger(__name__)


class BudgetService:
    """User commands that change entries or the balance.

    Each command applies its balance effect exactly once, persists, publishes a
    BalanceChanged event and returns the new RunState.
    """

    def __init__(
        self,
        state_dao: RunStateDAO,
        incomes: Ledger,
        expenses: Ledger,
        events: BalanceEvents | None = None,
    ):
        self._state_dao = state_dao
        self._ledgers = {"income": incomes, "expense": expenses}
        self._events = events
        self.persistence_errors: list[PersistenceFailure] = []

    def add_income(self, state, name, category, amount_text, frequency, now=None):
        return self._add("income", state, name, category, amount_text, frequency, now)

    def add_expense(self, state, name, category, amount_text, frequency, now=None):
        return self._add("expense", state, name, category, amount_text, frequency, now)

    def _add(
        self,
        kind: str,
        state: RunState,
        name: str,
        category: str,
        amount_text: str,
        frequency: Frequency,
        now: date | None,
    ) -> tuple[RunState, RecurringEntry]:
        if not name.strip():
            raise ValueError("Name cannot be empty.")
        amount = parse_amount(amount_text)
        ledger = self._ledgers[kind]

        entry = RecurringEntry(
            name=name.strip(),
            category=category,
            amount=amount,
            frequency=frequency,
            creation_date=now or today(),
        )
        entry.next_scheduled_date = initial_scheduled_date(entry)
        ledger.add(entry)

        delta = ledger.sign * amount
        new_state = replace(state, balance=state.balance + delta)
        self._commit(new_state, delta, entry.id)
        return new_state, entry

    def delete_entry(self, state: RunState, kind: str, entry_id: str) -> RunState:
        """Remove an entry and reverse its effect. Monthly budget records stay."""
        ledger = self._ledgers[kind]
        entry = ledger.get_by_id(entry_id)
        if entry is None or entry.category == MONTHLY_BUDGET_CATEGORY:
            return state
        ledger.remove(entry_id)

        delta = -ledger.sign * entry.amount
        new_state = replace(state, balance=state.balance + delta)
        self._commit(new_state, delta, entry.id)
        return new_state

    def set_initial_budget(self, state: RunState, amount_text: str, now: date | None = None) -> RunState:
        """Onboarding: the first budget becomes the balance."""
        amount = parse_amount(amount_text)
        ref = now or today()
        self._ledgers["income"].add(RecurringEntry(
            name=BUDGET_ENTRY_NAME.format(month=month_name(ref)),
            category=MONTHLY_BUDGET_CATEGORY,
            amount=amount,
            frequency=Frequency.one_time(),
            creation_date=ref,
        ))
        new_state = replace(
            state,
            balance=amount,
            starting_budget_of_month=amount,
            has_launched_before=True,
            last_opened_date=state.last_opened_date or ref,
        )
        self._commit(new_state, amount - state.balance)
        return new_state

    def set_next_month_budget(self, state: RunState, amount_text: str) -> RunState:
        new_state = replace(state, next_month_budget=parse_amount(amount_text))
        self._save_state(new_state)
        return new_state

    def clear_next_month_budget(self, state: RunState) -> RunState:
        new_state = replace(state, next_month_budget=None)
        self._save_state(new_state)
        return new_state

    def _commit(self, state: RunState, delta: Decimal, entry_id: str | None = None):
        self._save_state(state)
        if self._events:
            self._events.publish(BalanceChanged(
                balance=state.balance, delta=delta, reason="command", entry_id=entry_id,
            ))

    def _save_state(self, state: RunState):
        try:
            self._state_dao.save(state)
        except PersistenceFailure as e:
            logger.warning("Could not save run state: %s", e)
            self.persistence_errors.append(e)
