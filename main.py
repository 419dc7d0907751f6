import logging
import os
import sys

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.run_state_dao import RunStateDAO

from services.budget_service import BudgetService
from services.events import BalanceChanged, BalanceEvents
from services.ledger_service import Ledger
from services.startup_service import StartupService

from utils.app_config import get_db_folder, get_log_level
from utils.constants import APP_NAME, LOG_FORMAT
from utils.errors import InvalidAmountInput

logger = logging.getLogger(__name__)


def main():
    # ── Bootstrap: read DB folder and log level from pre-DB config ───────────
    logging.basicConfig(level=get_log_level(), format=LOG_FORMAT)
    db = DatabaseManager.open_in_folder(get_db_folder())

    # ── Ledgers and services ─────────────────────────────────────────────────
    events = BalanceEvents()
    incomes = Ledger("income", db)
    expenses = Ledger("expense", db)
    state_dao = RunStateDAO(db)
    startup_svc = StartupService(state_dao, incomes, expenses, events)
    budget_svc = BudgetService(state_dao, incomes, expenses, events)

    def on_balance_changed(event: BalanceChanged):
        logger.debug("Balance %s (%s, %s)", event.balance, event.reason, event.delta)

    events.subscribe(on_balance_changed)

    # ── Catch up and reconcile ───────────────────────────────────────────────
    report = startup_svc.run()
    state = report.state
    for error in report.persistence_errors:
        print(f"Warning: changes may not have been saved ({error})", file=sys.stderr)

    # ── First launch: collect the initial monthly budget ─────────────────────
    while report.needs_onboarding and not state.has_launched_before:
        text = input("Monthly budget: ")
        try:
            state = budget_svc.set_initial_budget(state, text)
        except InvalidAmountInput as e:
            print(e)

    print(APP_NAME)
    print(f"Balance:          {state.balance:,.2f}")
    print(f"Starting budget:  {state.starting_budget_of_month:,.2f}")
    for category, total in expenses.totals_by_category().items():
        print(f"  - {category}: {total:,.2f}")

    db.close()


if __name__ == "__main__":
    main()
