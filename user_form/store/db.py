"""
UserStore — SQLite-backed `users` table.

Usage::

    store = UserStore(db_path="~/.user-form/users.db")

    # Subscribe to the newest-first list; the callback fires immediately
    sub = store.observe_all().subscribe(print)

    # Insert a record; subscribers receive the new list before insert returns
    row_id = store.insert(UserRecord(name="Ana", age=30, email="ana@x.com"))

    sub.cancel()
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from user_form.feed import LiveFeed
from user_form.store.models import UserRecord

__all__ = ["UserStore", "DEFAULT_DB_PATH", "FEED_RELEASE_AFTER"]

logger = logging.getLogger(__name__)

# Path to the SQL schema file bundled with this package
_SCHEMA_PATH = Path(__file__).parent / "migrations" / "schema.sql"

DEFAULT_DB_PATH = "~/.user-form/users.db"

# Seconds the record feed keeps its snapshot after the last subscriber leaves
FEED_RELEASE_AFTER = 5.0


class UserStore:
    """
    Insert / list interface for the local SQLite user table.

    The database file and schema are created automatically on first open.
    All operations use context-managed connections; no persistent connection
    is kept open between calls, so insert() may run on a worker thread.
    """

    def __init__(
        self,
        db_path: str,
        release_after: Optional[float] = FEED_RELEASE_AFTER,
    ) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        self._feed: LiveFeed[list[UserRecord]] = LiveFeed(
            self.all_users, release_after=release_after
        )

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ── Internal helpers ──────────────────────────────────────────────────

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        """Create tables if they don't already exist."""
        sql = _SCHEMA_PATH.read_text(encoding="utf-8")
        with self._connect() as conn:
            conn.executescript(sql)
        logger.debug("Schema ready at %s", self._db_path)

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> UserRecord:
        return UserRecord(
            id=row["id"],
            name=row["name"],
            age=row["age"],
            email=row["email"],
        )

    # ── Public API ────────────────────────────────────────────────────────

    def insert(self, record: UserRecord) -> int:
        """
        Persist *record* and notify feed subscribers.

        Uses INSERT OR REPLACE so an explicit id that already exists
        overwrites that row; a record with id=None gets a fresh id.

        Returns:
            The SQLite rowid of the inserted (or replaced) row.

        Raises:
            sqlite3.Error on any database failure.
        """
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT OR REPLACE INTO users (id, name, age, email) VALUES (?, ?, ?, ?)",
                (record.id, record.name, record.age, record.email),
            )
            conn.commit()
            row_id = cur.lastrowid
        logger.info("Inserted user %d (%s)", row_id, record.name)
        self._feed.refresh()
        return row_id  # type: ignore[return-value]

    def all_users(self) -> list[UserRecord]:
        """Return every stored record, most recently inserted first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, name, age, email FROM users ORDER BY id DESC"
            ).fetchall()
        return [self._row_to_record(r) for r in rows]

    def observe_all(self) -> LiveFeed[list[UserRecord]]:
        """Live feed of all_users(); refreshed after every insert()."""
        return self._feed

    def close(self) -> None:
        """Drop feed subscribers and cancel any pending release timer."""
        self._feed.close()
