APP_NAME = "MyBudget"
DB_FILE = "mybudget.db"

DATE_FORMAT = "%Y-%m-%d"

# ── Store keys ───────────────────────────────────────────────────────────────
KEY_BALANCE = "balance"
KEY_INCOMES = "incomes"
KEY_EXPENSES = "expenses"
KEY_LAST_OPENED = "lastOpenedDate"
KEY_LAST_RESET_MONTH = "lastResetMonth"
KEY_NEXT_MONTH_BUDGET = "nextMonthBudget"
KEY_STARTING_BUDGET = "startingBudgetOfMonth"
KEY_HAS_LAUNCHED = "hasLaunchedBefore"

LEDGER_KEYS = {
    "income": KEY_INCOMES,
    "expense": KEY_EXPENSES,
}

# ── Categories ───────────────────────────────────────────────────────────────
MONTHLY_BUDGET_CATEGORY = "Monthly budget"
BUDGET_ENTRY_NAME = "Budget for {month}"

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DEFAULT_LOG_LEVEL = "INFO"
