import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from database.run_state_dao import RunStateDAO
from models.run_state import RunState
from services.events import BalanceChanged, BalanceEvents
from services.ledger_service import Ledger
from services.reconciliation_service import ReconciliationService
from services.scheduler_service import CatchUpScheduler
from utils.currency import format_signed
from utils.date_helpers import today
from utils.errors import PersistenceFailure

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    state: RunState
    needs_onboarding: bool
    did_reset: bool = False
    expense_delta: Decimal = Decimal("0")
    income_delta: Decimal = Decimal("0")
    firings: int = 0
    archived_ids: list[str] = field(default_factory=list)
    persistence_errors: list[PersistenceFailure] = field(default_factory=list)


class StartupService:
    """Runs the engine once per application start, in a fixed order."""

    def __init__(
        self,
        state_dao: RunStateDAO,
        incomes: Ledger,
        expenses: Ledger,
        events: BalanceEvents | None = None,
    ):
        self._state_dao = state_dao
        self._incomes = incomes
        self._expenses = expenses
        self._events = events
        self._reconciler = ReconciliationService(incomes, expenses)

    def run(self, now: date | None = None) -> RunReport:
        ref = now or today()
        errors: list[PersistenceFailure] = []

        # ── Load ─────────────────────────────────────────────────────────────
        try:
            state = self._state_dao.load()
        except PersistenceFailure as e:
            logger.warning("Run state unreadable, starting fresh: %s", e)
            errors.append(e)
            state = RunState()

        for ledger in (self._incomes, self._expenses):
            try:
                ledger.load()
            except PersistenceFailure as e:
                logger.warning("%s ledger unreadable, leaving it untouched: %s", ledger.kind, e)
                errors.append(e)
        last_opened = state.last_opened_date

        # ── Monthly reconciliation ───────────────────────────────────────────
        previous_balance = state.balance
        recon = self._reconciler.reconcile(state, ref)
        state = recon.state
        if recon.did_reset:
            self._publish(state.balance, state.balance - previous_balance, "reset")

        # ── Catch-up: expenses, then incomes ─────────────────────────────────
        scheduler = CatchUpScheduler(self._events)
        expense_delta = scheduler.catch_up(self._expenses, last_opened, ref, state.balance)
        state.balance += expense_delta
        income_delta = scheduler.catch_up(self._incomes, last_opened, ref, state.balance)
        state.balance += income_delta

        # ── Backfill and persist ─────────────────────────────────────────────
        for ledger in (self._incomes, self._expenses):
            ledger.backfill_schedules()
            ledger.save()
            errors.extend(ledger.persistence_errors)
            ledger.persistence_errors.clear()
        try:
            self._state_dao.save(state)
        except PersistenceFailure as e:
            logger.warning("Could not save run state: %s", e)
            errors.append(e)

        delta = expense_delta + income_delta
        if delta:
            self._publish(state.balance, delta, "run")
        logger.info(
            "Run for %s: %d firings (%s), balance %s",
            ref, scheduler.firings, format_signed(delta), state.balance,
        )

        return RunReport(
            state=state,
            needs_onboarding=not state.has_launched_before,
            did_reset=recon.did_reset,
            expense_delta=expense_delta,
            income_delta=income_delta,
            firings=scheduler.firings,
            archived_ids=recon.archived_ids,
            persistence_errors=errors,
        )

    def _publish(self, balance: Decimal, delta: Decimal, reason: str):
        if self._events:
            self._events.publish(BalanceChanged(balance=balance, delta=delta, reason=reason))
