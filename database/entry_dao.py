import json

from database.store import KeyValueStore
from models.entry import RecurringEntry
from models.frequency import Frequency
from utils.currency import to_decimal
from utils.date_helpers import format_date, parse_date
from utils.errors import PersistenceFailure


def entry_to_dict(entry: RecurringEntry) -> dict:
    return {
        "id": entry.id,
        "name": entry.name,
        "category": entry.category,
        "amount": str(entry.amount),
        "frequency": entry.frequency.to_dict(),
        "creation_date": format_date(entry.creation_date),
        "next_scheduled_date": (
            format_date(entry.next_scheduled_date) if entry.next_scheduled_date else None
        ),
        "is_archived": entry.is_archived,
        "source_id": entry.source_id,
    }


def entry_from_dict(data: dict) -> RecurringEntry:
    """Raises KeyError/ValueError/TypeError on a malformed record."""
    creation = parse_date(data["creation_date"])
    if creation is None:
        raise ValueError(f"Invalid creation date: {data['creation_date']!r}")
    next_raw = data.get("next_scheduled_date")
    next_date = parse_date(next_raw) if next_raw else None
    if next_raw and next_date is None:
        raise ValueError(f"Invalid next scheduled date: {next_raw!r}")
    return RecurringEntry(
        id=data["id"],
        name=data["name"],
        category=data["category"],
        amount=to_decimal(data["amount"]),
        frequency=Frequency.from_dict(data["frequency"]),
        creation_date=creation,
        next_scheduled_date=next_date,
        is_archived=bool(data.get("is_archived", False)),
        source_id=data.get("source_id"),
    )


class EntryDAO:
    """Stores one ledger as a single JSON blob under `key` (whole-list overwrite)."""

    def __init__(self, store: KeyValueStore, key: str):
        self._store = store
        self.key = key

    def load(self) -> list[RecurringEntry]:
        raw = self._store.get(self.key)
        if raw is None:
            return []
        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise ValueError("expected a list of entries")
            return [entry_from_dict(r) for r in records]
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceFailure(self.key, f"cannot decode entries: {e}") from e

    def save(self, entries: list[RecurringEntry]):
        try:
            raw = json.dumps([entry_to_dict(e) for e in entries])
        except (TypeError, ValueError) as e:
            raise PersistenceFailure(self.key, f"cannot encode entries: {e}") from e
        self._store.set(self.key, raw)
