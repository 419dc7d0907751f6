from database.store import KeyValueStore
from models.run_state import RunState
from utils.constants import (
    KEY_BALANCE, KEY_LAST_OPENED, KEY_LAST_RESET_MONTH, KEY_NEXT_MONTH_BUDGET,
    KEY_STARTING_BUDGET, KEY_HAS_LAUNCHED,
)
from utils.currency import to_decimal
from utils.date_helpers import format_date, parse_date
from utils.errors import BudgetError, PersistenceFailure


class RunStateDAO:
    """Reads and writes the run-state scalars, one store key each."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def load(self) -> RunState:
        """Missing keys fall back to RunState defaults; unreadable values raise."""
        state = RunState()
        try:
            raw = self._store.get(KEY_BALANCE)
            if raw is not None:
                state.balance = to_decimal(raw)

            raw = self._store.get(KEY_LAST_OPENED)
            if raw is not None:
                state.last_opened_date = parse_date(raw)
                if state.last_opened_date is None:
                    raise ValueError(f"bad date {raw!r}")

            raw = self._store.get(KEY_LAST_RESET_MONTH)
            if raw is not None:
                state.last_reset_month = int(raw)

            raw = self._store.get(KEY_STARTING_BUDGET)
            if raw is not None:
                state.starting_budget_of_month = to_decimal(raw)

            raw = self._store.get(KEY_NEXT_MONTH_BUDGET)
            state.next_month_budget = to_decimal(raw) if raw is not None else None

            raw = self._store.get(KEY_HAS_LAUNCHED)
            state.has_launched_before = raw in ("1", "true", "True")
        except PersistenceFailure:
            raise
        except (BudgetError, ValueError) as e:
            raise PersistenceFailure("run_state", f"cannot decode: {e}") from e
        return state

    def save(self, state: RunState):
        self._store.set(KEY_BALANCE, str(state.balance))
        if state.last_opened_date is not None:
            self._store.set(KEY_LAST_OPENED, format_date(state.last_opened_date))
        self._store.set(KEY_LAST_RESET_MONTH, str(state.last_reset_month))
        self._store.set(KEY_STARTING_BUDGET, str(state.starting_budget_of_month))
        if state.next_month_budget is None:
            self._store.delete(KEY_NEXT_MONTH_BUDGET)
        else:
            self._store.set(KEY_NEXT_MONTH_BUDGET, str(state.next_month_budget))
        self._store.set(KEY_HAS_LAUNCHED, "1" if state.has_launched_before else "0")
