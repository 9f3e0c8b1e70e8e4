"""UserRepository — facade between the form view model and UserStore."""

import logging
import sqlite3

from user_form.exceptions import StorageError
from user_form.feed import LiveFeed
from user_form.store.db import UserStore
from user_form.store.models import UserRecord

__all__ = ["UserRepository"]

logger = logging.getLogger(__name__)


class UserRepository:
    """Pass-through to UserStore that reports write failures as StorageError."""

    def __init__(self, store: UserStore) -> None:
        self._store = store

    def insert(self, record: UserRecord) -> int:
        """
        Persist *record* via the store.

        Returns:
            The id assigned to the record.

        Raises:
            StorageError: wrapping the underlying sqlite3 / OS / conversion error.
        """
        try:
            return self._store.insert(record)
        except (sqlite3.Error, OSError, OverflowError, ValueError) as exc:
            logger.warning("Insert failed for %s: %s", record, exc)
            raise StorageError(str(exc)) from exc

    def list_all(self) -> LiveFeed[list[UserRecord]]:
        """Live newest-first list of every stored record."""
        return self._store.observe_all()
