import logging
import os
import sqlite3

from utils.constants import DB_FILE
from utils.errors import PersistenceFailure

logger = logging.getLogger(__name__)


class DatabaseManager:
    """SQLite-backed key-value store holding the ledgers and run-state scalars."""

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema."""
        conn = self.get_connection()
        self._create_schema(conn)
        conn.commit()

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    # ── KeyValueStore ────────────────────────────────────────────────────────

    def get(self, key: str) -> str | None:
        try:
            row = self.get_connection().execute(
                "SELECT value FROM app_settings WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceFailure(key, f"read failed: {e}") from e
        return row["value"] if row else None

    def set(self, key: str, value: str):
        try:
            with self.get_connection() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
                    (key, value),
                )
        except sqlite3.Error as e:
            raise PersistenceFailure(key, f"write failed: {e}") from e

    def delete(self, key: str):
        try:
            with self.get_connection() as conn:
                conn.execute("DELETE FROM app_settings WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise PersistenceFailure(key, f"delete failed: {e}") from e

    @staticmethod
    def open_in_folder(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the store file.

        db_folder: if provided, the DB file lives in that directory instead of CWD.
        """
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            db_path = os.path.join(db_folder, DB_FILE)
        else:
            db_path = DB_FILE
        db = DatabaseManager(db_path)
        db.initialize()
        logger.debug("Opened store at %s", db_path)
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
