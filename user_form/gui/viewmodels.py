"""
GUI ViewModels — pure-Python observable state containers.

No Qt imports here; every class is testable without a display.
Qt widgets subscribe to the feeds exposed by these objects and update
themselves on each emission.

Public API
──────────
FormField          — the three editable fields
FormState          — immutable snapshot of the form
change_field, validate, reject, begin_save,
save_succeeded, save_failed, reset
                   — pure transitions, one per form event
run_inline         — dispatcher that runs a save job on the caller's thread
UserFormViewModel  — owns FormState, talks to UserRepository
"""

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional

from user_form.exceptions import ValidationError
from user_form.feed import LiveFeed
from user_form.store.models import UserRecord
from user_form.store.repository import UserRepository

__all__ = [
    "FormField",
    "FormState",
    "change_field",
    "validate",
    "reject",
    "begin_save",
    "save_succeeded",
    "save_failed",
    "reset",
    "Dispatcher",
    "run_inline",
    "UserFormViewModel",
    "MSG_REQUIRED",
    "MSG_BAD_AGE",
    "MSG_BAD_EMAIL",
    "MSG_SAVED",
    "MAX_AGE",
]

logger = logging.getLogger(__name__)

MSG_REQUIRED  = "all fields are required"
MSG_BAD_AGE   = "age must be a positive integer"
MSG_BAD_EMAIL = "invalid email address"
MSG_SAVED     = "record saved"

# Signed ASCII digits only
_AGE_PATTERN = re.compile(r"[+-]?[0-9]+")

# 32-bit signed ceiling, well inside SQLite INTEGER
MAX_AGE = 2**31 - 1


# ── FormState ──────────────────────────────────────────────────────────────────

class FormField(str, Enum):
    NAME  = "name"
    AGE   = "age"
    EMAIL = "email"


@dataclass(frozen=True)
class FormState:
    """
    Snapshot of the form.

    Fields
    ──────
    name, age, email  — raw text as typed (age is parsed only on save)
    is_saving         — True only while a write is in flight
    error_message     — set on rejection / failed write
    success_message   — set after a successful write
    """
    name:            str           = ""
    age:             str           = ""
    email:           str           = ""
    is_saving:       bool          = False
    error_message:   Optional[str] = None
    success_message: Optional[str] = None


# ── Transitions ────────────────────────────────────────────────────────────────

def change_field(state: FormState, field: FormField, value: str) -> FormState:
    """Set *field* to *value* and clear both messages."""
    field = FormField(field)
    return replace(
        state,
        **{field.value: value},
        error_message=None,
        success_message=None,
    )


def validate(state: FormState) -> int:
    """
    Check the form in order: required fields, age, email.

    Returns:
        The parsed age.

    Raises:
        ValidationError: with the message for the first failing check.
    """
    if not state.name.strip() or not state.age.strip() or not state.email.strip():
        raise ValidationError(MSG_REQUIRED)

    text = state.age.strip()
    if not _AGE_PATTERN.fullmatch(text):
        raise ValidationError(MSG_BAD_AGE)
    age = int(text)
    if not 0 < age <= MAX_AGE:
        raise ValidationError(MSG_BAD_AGE)

    if "@" not in state.email:
        raise ValidationError(MSG_BAD_EMAIL)

    return age


def reject(state: FormState, message: str) -> FormState:
    return replace(state, is_saving=False, error_message=message, success_message=None)


def begin_save(state: FormState) -> FormState:
    return replace(state, is_saving=True, error_message=None, success_message=None)


def save_succeeded() -> FormState:
    return FormState(success_message=MSG_SAVED)


def save_failed(state: FormState, error: BaseException) -> FormState:
    """Keep the submitted values and report *error*."""
    return replace(
        state,
        is_saving=False,
        error_message=f"error saving record: {error}",
        success_message=None,
    )


def reset() -> FormState:
    return FormState()


# ── Dispatch ───────────────────────────────────────────────────────────────────

# dispatch(job, on_success, on_failure): run job() somewhere, then call exactly
# one of the callbacks on the view model's own thread.
Dispatcher = Callable[
    [Callable[[], int], Callable[[int], None], Callable[[BaseException], None]],
    None,
]


def run_inline(
    job: Callable[[], int],
    on_success: Callable[[int], None],
    on_failure: Callable[[BaseException], None],
) -> None:
    """Run *job* on the calling thread (tests, headless CLI)."""
    try:
        row_id = job()
    except Exception as exc:  # noqa: BLE001
        on_failure(exc)
        return
    on_success(row_id)


# ── UserFormViewModel ──────────────────────────────────────────────────────────

class UserFormViewModel:
    """
    Holds the form state and persists valid submissions.

    Attributes
    ──────────
    state            — current FormState (read-only)
    observe_state()  — feed of FormState, emitted after every transition
    observe_records()— feed of stored records, newest first
    """

    def __init__(
        self,
        repository: UserRepository,
        dispatch: Optional[Dispatcher] = None,
    ) -> None:
        self._repository = repository
        self._dispatch: Dispatcher = dispatch or run_inline
        self._state = FormState()
        self._state_feed: LiveFeed[FormState] = LiveFeed(
            lambda: self._state, release_after=None
        )

    # ── State ─────────────────────────────────────────────────────────────

    @property
    def state(self) -> FormState:
        return self._state

    def _set_state(self, state: FormState) -> None:
        self._state = state
        logger.debug("FormState → %s", state)
        self._state_feed.refresh()

    def observe_state(self) -> LiveFeed[FormState]:
        return self._state_feed

    def observe_records(self) -> LiveFeed[list[UserRecord]]:
        return self._repository.list_all()

    # ── Events ────────────────────────────────────────────────────────────

    def on_field_change(self, field: FormField, value: str) -> None:
        self._set_state(change_field(self._state, field, value))

    def reset_form(self) -> None:
        self._set_state(reset())

    def save(self) -> bool:
        """
        Validate the form and, if valid, dispatch the insert.

        Returns:
            True if a write was dispatched, False if validation rejected it.
        """
        submitted = self._state
        try:
            age = validate(submitted)
        except ValidationError as exc:
            logger.debug("Save rejected: %s", exc)
            self._set_state(reject(submitted, str(exc)))
            return False

        record = UserRecord(name=submitted.name, age=age, email=submitted.email)
        self._set_state(begin_save(submitted))

        def on_success(row_id: int) -> None:
            logger.info("Saved record id=%s", row_id)
            self._set_state(save_succeeded())

        def on_failure(exc: BaseException) -> None:
            logger.warning("Save failed: %s", exc)
            self._set_state(save_failed(submitted, exc))

        self._dispatch(lambda: self._repository.insert(record), on_success, on_failure)
        return True
