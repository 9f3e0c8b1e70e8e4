"""
Project-wide custom exception hierarchy.
All modules raise subclasses of UserFormError — never bare Exception.
"""

__all__ = [
    "UserFormError",
    "ValidationError",
    "StorageError",
]


class UserFormError(Exception):
    """Root exception for all user-form errors."""


# ── Form ──────────────────────────────────────────────────────────────────────

class ValidationError(UserFormError):
    """Raised when form input is rejected before it reaches storage."""


# ── Store ─────────────────────────────────────────────────────────────────────

class StorageError(UserFormError):
    """Raised on SQLite / store I/O errors; the message carries the cause."""
