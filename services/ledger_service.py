import logging
from datetime import date
from decimal import Decimal

from database.entry_dao import EntryDAO
from database.store import KeyValueStore
from models.entry import RecurringEntry
from services.recurrence import initial_scheduled_date
from utils.constants import LEDGER_KEYS
from utils.date_helpers import month_key
from utils.errors import InvalidAmountInput, PersistenceFailure

logger = logging.getLogger(__name__)


class Ledger:
    """Ordered collection of income or expense entries.

    Insertion order is creation order. The ledger never touches the balance:
    callers apply `sign * amount` themselves.
    """

    def __init__(self, kind: str, store: KeyValueStore):
        if kind not in LEDGER_KEYS:
            raise ValueError("Type must be income or expense.")
        self.kind = kind
        self._dao = EntryDAO(store, LEDGER_KEYS[kind])
        self._entries: list[RecurringEntry] = []
        self.persistence_errors: list[PersistenceFailure] = []
        self._unreadable = False

    @property
    def sign(self) -> int:
        return 1 if self.kind == "income" else -1

    @property
    def entries(self) -> list[RecurringEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def get_by_id(self, entry_id: str) -> RecurringEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def templates(self) -> list[RecurringEntry]:
        return [e for e in self._entries if e.is_template]

    # ── Mutations ────────────────────────────────────────────────────────────

    def add(self, entry: RecurringEntry, persist: bool = True) -> RecurringEntry:
        if entry.amount < 0:
            raise InvalidAmountInput("Amount must be 0 or greater.")
        self._entries.append(entry)
        if persist:
            self.save()
        return entry

    def remove(self, entry_id: str) -> RecurringEntry | None:
        """Remove and return the entry, or None when no entry has that id."""
        entry = self.get_by_id(entry_id)
        if entry is None:
            logger.debug("No %s entry %s to remove", self.kind, entry_id)
            return None
        self._entries.remove(entry)
        self.save()
        return entry

    def reschedule(self, entry_id: str, next_date: date | None):
        entry = self.get_by_id(entry_id)
        if entry is None:
            raise KeyError(entry_id)
        entry.next_scheduled_date = next_date

    def archive_and_remove_stale(self, now: date) -> list[RecurringEntry]:
        """Archive settled entries created outside now's month.

        Entries that still have an occurrence to fire stay, whatever their month.
        """
        archived = self._take_stale(now)
        for entry in archived:
            entry.is_archived = True
        if archived:
            logger.info("Archived %d %s entries", len(archived), self.kind)
        return archived

    def prune_closed_months(self, now: date) -> list[RecurringEntry]:
        """Drop settled entries created outside now's month, without archiving."""
        return self._take_stale(now)

    def _take_stale(self, now: date) -> list[RecurringEntry]:
        current = month_key(now)
        stale = [
            e for e in self._entries
            if e.month_key != current and e.is_settled(now)
        ]
        if stale:
            stale_ids = {e.id for e in stale}
            self._entries = [e for e in self._entries if e.id not in stale_ids]
        return stale

    def backfill_schedules(self) -> int:
        """Give every template without a next date its first due date."""
        filled = 0
        for entry in self._entries:
            if entry.is_template and entry.next_scheduled_date is None:
                entry.next_scheduled_date = initial_scheduled_date(entry)
                filled += 1
        return filled

    # ── Derived views ────────────────────────────────────────────────────────

    def totals_by_category(self) -> dict[str, Decimal]:
        totals: dict[str, Decimal] = {}
        for entry in self._entries:
            if entry.is_archived:
                continue
            totals[entry.category] = totals.get(entry.category, Decimal("0")) + entry.amount
        return totals

    def total(self) -> Decimal:
        return sum((e.amount for e in self._entries if not e.is_archived), Decimal("0"))

    def history(self) -> list[RecurringEntry]:
        """Non-archived entries, newest first."""
        return [e for e in reversed(self._entries) if not e.is_archived]

    def latest_in_category(self, category: str) -> RecurringEntry | None:
        for entry in reversed(self._entries):
            if entry.category == category:
                return entry
        return None

    # ── Persistence ──────────────────────────────────────────────────────────

    def load(self):
        """Replace the in-memory entries with the stored ones.

        On failure the current entries are kept, PersistenceFailure is raised and
        later writes are refused so the stored blob is not replaced.
        """
        try:
            self._entries = self._dao.load()
        except PersistenceFailure:
            self._unreadable = True
            raise
        self._unreadable = False

    def persist(self):
        if self._unreadable:
            raise PersistenceFailure(self._dao.key, "stored entries are unreadable; not overwriting")
        self._dao.save(self._entries)

    def save(self):
        """persist(), but a failure is logged and recorded instead of raised."""
        try:
            self.persist()
        except PersistenceFailure as e:
            logger.warning("Could not save %s ledger: %s", self.kind, e)
            self.persistence_errors.append(e)
