from datetime import date
from decimal import Decimal

import pytest

from models.frequency import Frequency
from models.run_state import RunState
from services.reconciliation_service import ReconciliationService
from tests.conftest import make_entry


@pytest.fixture
def october(incomes, expenses):
    """Ledgers as they look at the end of October."""
    incomes.add(make_entry("Budget for October", "1500", created=date(2023, 10, 1), category="Monthly budget"))
    incomes.add(make_entry("Gift", "50", created=date(2023, 10, 5), category="Gifts"))
    expenses.add(make_entry("Coffee", "3", created=date(2023, 10, 15), source_id="t1"))
    expenses.add(make_entry(
        "Rent", "800", Frequency.monthly(), created=date(2023, 10, 1), next_date=date(2023, 11, 1),
    ))
    return ReconciliationService(incomes, expenses)


def october_state(**kwargs) -> RunState:
    values = dict(
        balance=Decimal("200"),
        last_opened_date=date(2023, 10, 20),
        last_reset_month=10,
        starting_budget_of_month=Decimal("1500"),
    )
    values.update(kwargs)
    return RunState(**values)


def test_reset_to_latest_monthly_budget(october, incomes, expenses):
    result = october.reconcile(october_state(), date(2023, 11, 2))

    assert result.did_reset
    assert result.new_balance == Decimal("1500")
    assert result.state.balance == Decimal("1500")
    assert result.state.starting_budget_of_month == Decimal("1500")
    assert result.state.last_reset_month == 11
    assert result.state.has_launched_before
    assert result.state.last_opened_date == date(2023, 11, 2)
    assert len(result.archived_ids) == 3

    [budget] = incomes.entries
    assert budget.name == "Budget for November"
    assert budget.category == "Monthly budget"
    assert budget.amount == Decimal("1500")
    assert budget.creation_date == date(2023, 11, 2)
    assert [e.name for e in expenses] == ["Rent"]


def test_next_month_budget_wins_and_is_consumed(october):
    state = october_state(next_month_budget=Decimal("1750"))
    result = october.reconcile(state, date(2023, 11, 1))

    assert result.state.balance == Decimal("1750")
    assert result.state.next_month_budget is None
    assert state.next_month_budget == Decimal("1750")


def test_reconcile_twice_resets_once(october, incomes):
    first = october.reconcile(october_state(), date(2023, 11, 2))
    second = october.reconcile(first.state, date(2023, 11, 2))

    assert first.did_reset
    assert not second.did_reset
    assert second.state == first.state
    assert len(incomes.entries) == 1


def test_already_reset_this_month_is_a_no_op(october, incomes):
    result = october.reconcile(october_state(last_reset_month=11), date(2023, 11, 2))

    assert not result.did_reset
    assert result.state.balance == Decimal("200")
    assert result.state.last_opened_date == date(2023, 11, 2)
    assert len(incomes.entries) == 2


def test_same_month_is_a_no_op(october):
    result = october.reconcile(october_state(), date(2023, 10, 31))
    assert not result.did_reset
    assert result.archived_ids == []
    assert result.state.last_opened_date == date(2023, 10, 31)


def test_first_run_never_resets(october):
    result = october.reconcile(RunState(), date(2023, 11, 2))
    assert not result.did_reset
    assert result.state.last_opened_date == date(2023, 11, 2)


def test_without_any_budget_the_balance_is_kept(incomes, expenses):
    service = ReconciliationService(incomes, expenses)
    result = service.reconcile(october_state(), date(2023, 11, 2))

    assert result.did_reset
    assert result.state.balance == Decimal("200")
    assert incomes.entries[-1].amount == Decimal("200")


def test_year_boundary(incomes, expenses):
    incomes.add(make_entry("Budget for December", "900", created=date(2023, 12, 1), category="Monthly budget"))
    service = ReconciliationService(incomes, expenses)
    state = october_state(last_opened_date=date(2023, 12, 30), last_reset_month=12)

    result = service.reconcile(state, date(2024, 1, 3))

    assert result.state.last_reset_month == 1
    assert result.state.balance == Decimal("900")
    assert incomes.entries[-1].name == "Budget for January"
