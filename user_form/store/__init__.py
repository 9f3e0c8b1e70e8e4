"""
store — SQLite-backed persistence layer for registered users.

Public API
──────────
UserRecord      — dataclass representing one stored user
UserStore       — the `users` table: insert, list newest first, live feed
UserRepository  — facade used by the form view model
"""

from user_form.store.models import UserRecord
from user_form.store.db import UserStore
from user_form.store.repository import UserRepository

__all__ = ["UserRecord", "UserStore", "UserRepository"]
