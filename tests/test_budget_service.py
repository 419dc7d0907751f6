from datetime import date
from decimal import Decimal

import pytest

from models.frequency import Frequency
from models.run_state import RunState
from utils.errors import InvalidAmountInput, MalformedCustomPeriod


def test_add_income_applies_balance_once(budget_service, incomes, state_dao):
    state, entry = budget_service.add_income(
        RunState(balance=Decimal("100")), "Salary", "Work", "2000", Frequency.monthly(), now=date(2024, 1, 15),
    )

    assert state.balance == Decimal("2100")
    assert entry.next_scheduled_date == date(2024, 2, 15)
    assert incomes.entries == [entry]
    assert state_dao.load().balance == Decimal("2100")


def test_add_expense_accepts_comma_decimal(budget_service, expenses):
    state, entry = budget_service.add_expense(
        RunState(balance=Decimal("100")), "Lunch", "Food", "12,50", Frequency.one_time(), now=date(2024, 1, 15),
    )

    assert state.balance == Decimal("87.50")
    assert entry.amount == Decimal("12.50")
    assert entry.next_scheduled_date is None


def test_invalid_amount_never_reaches_the_ledger(budget_service, expenses):
    with pytest.raises(InvalidAmountInput):
        budget_service.add_expense(RunState(), "Lunch", "Food", "twelve", Frequency.one_time())
    with pytest.raises(InvalidAmountInput):
        budget_service.add_expense(RunState(), "Lunch", "Food", "-3", Frequency.one_time())
    assert len(expenses) == 0


def test_empty_name_is_rejected(budget_service):
    with pytest.raises(ValueError, match="Name cannot be empty"):
        budget_service.add_income(RunState(), "  ", "Work", "10", Frequency.one_time())


def test_zero_custom_period_is_rejected_before_creation(budget_service, incomes):
    with pytest.raises(MalformedCustomPeriod):
        budget_service.add_income(RunState(), "Odd", "Other", "10", Frequency.custom())
    assert len(incomes) == 0


def test_delete_reverses_the_entry(budget_service, expenses):
    start = RunState(balance=Decimal("100"))
    state, entry = budget_service.add_expense(start, "Taxi", "Travel", "40", Frequency.one_time())
    state = budget_service.delete_entry(state, "expense", entry.id)

    assert state.balance == Decimal("100")
    assert len(expenses) == 0


def test_delete_missing_entry_is_a_no_op(budget_service):
    state = RunState(balance=Decimal("5"))
    assert budget_service.delete_entry(state, "income", "nope") is state


def test_monthly_budget_entries_cannot_be_deleted(budget_service, incomes):
    state = budget_service.set_initial_budget(RunState(), "1500", now=date(2023, 10, 1))
    budget = incomes.entries[0]

    assert budget_service.delete_entry(state, "income", budget.id) is state
    assert incomes.entries == [budget]


def test_initial_budget_completes_onboarding(budget_service, incomes, events):
    received = []
    events.subscribe(received.append)

    state = budget_service.set_initial_budget(RunState(), "1500", now=date(2023, 10, 1))

    assert state.balance == Decimal("1500")
    assert state.starting_budget_of_month == Decimal("1500")
    assert state.has_launched_before
    assert incomes.entries[0].name == "Budget for October"
    assert incomes.entries[0].category == "Monthly budget"
    assert not incomes.entries[0].frequency.is_recurring
    assert received[-1].balance == Decimal("1500")


def test_next_month_budget_is_stored(budget_service, state_dao):
    state = budget_service.set_next_month_budget(RunState(), "1750")
    assert state_dao.load().next_month_budget == Decimal("1750")

    budget_service.clear_next_month_budget(state)
    assert state_dao.load().next_month_budget is None
