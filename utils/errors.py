class BudgetError(Exception):
    """Base class for errors raised by the budget engine."""


class PersistenceFailure(BudgetError):
    """A store read/write or (de)serialization failed.

    Never fatal: the in-memory state stays authoritative for the current run.
    """

    def __init__(self, key: str, message: str):
        super().__init__(f"{key}: {message}")
        self.key = key


class InvalidAmountInput(BudgetError, ValueError):
    """Amount text that is not a non-negative number."""


class MalformedCustomPeriod(BudgetError, ValueError):
    """Custom period whose offsets are all zero or negative."""
