from datetime import date
from decimal import Decimal

import pytest

from database.run_state_dao import RunStateDAO
from database.store import MemoryStore
from models.entry import RecurringEntry
from models.frequency import Frequency
from services.budget_service import BudgetService
from services.events import BalanceEvents
from services.ledger_service import Ledger
from services.startup_service import StartupService
from utils.errors import PersistenceFailure


class FailingStore(MemoryStore):
    """Reads work, every write fails."""

    def set(self, key, value):
        raise PersistenceFailure(key, "disk full")

    def delete(self, key):
        raise PersistenceFailure(key, "disk full")


class FlakyStore(MemoryStore):
    """Writes to the keys in `failing` fail, everything else works."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.failing: set[str] = set()

    def set(self, key, value):
        if key in self.failing:
            raise PersistenceFailure(key, "write lost")
        super().set(key, value)


def make_entry(
    name="Coffee",
    amount="1",
    frequency=None,
    created=date(2023, 10, 10),
    next_date=None,
    category="Food",
    source_id=None,
) -> RecurringEntry:
    return RecurringEntry(
        name=name,
        category=category,
        amount=Decimal(amount),
        frequency=frequency or Frequency.one_time(),
        creation_date=created,
        next_scheduled_date=next_date,
        source_id=source_id,
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def incomes(store):
    return Ledger("income", store)


@pytest.fixture
def expenses(store):
    return Ledger("expense", store)


@pytest.fixture
def events():
    return BalanceEvents()


@pytest.fixture
def state_dao(store):
    return RunStateDAO(store)


@pytest.fixture
def budget_service(state_dao, incomes, expenses, events):
    return BudgetService(state_dao, incomes, expenses, events)


@pytest.fixture
def startup_service(state_dao, incomes, expenses, events):
    return StartupService(state_dao, incomes, expenses, events)
