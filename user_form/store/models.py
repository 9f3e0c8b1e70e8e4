"""Data models for the store module."""

from dataclasses import dataclass
from typing import Optional

__all__ = ["UserRecord"]


@dataclass
class UserRecord:
    """
    Persistent record of one registered user.

    Fields
    ──────
    name   — display name, non-empty once validated
    age    — positive integer once validated
    email  — contains at least one "@" once validated
    id     — SQLite row id (None until saved)
    """
    name:  str
    age:   int
    email: str
    id:    Optional[int] = None

    def __str__(self) -> str:
        return f"UserRecord(id={self.id}, name={self.name!r}, age={self.age}, email={self.email!r})"
