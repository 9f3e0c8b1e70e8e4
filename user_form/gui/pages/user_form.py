"""
UserFormPage — the single screen of the user-form GUI.

Top half: name / age / email inputs with Save and Clear buttons and a status
line.  Bottom half: every stored record, newest first.

Layout
──────
  ┌─────────────────────────────────────────┐
  │ New User                                │
  │ Name:  [______________________________] │
  │ Age:   [______________________________] │
  │ Email: [______________________________] │
  │                        [Clear] [Save]   │
  │ record saved                            │
  │ Registered Users                    (2) │
  │ ┌──────────────────────────────────────┐│
  │ │ ID │ Name │ Age │ Email              ││
  │ │  2 │ Bea  │ 41  │ bea@x.com          ││
  │ │  1 │ Ana  │ 30  │ ana@x.com          ││
  │ └──────────────────────────────────────┘│
  └─────────────────────────────────────────┘
"""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QThread, pyqtSignal, pyqtSlot
from PyQt6.QtWidgets import (
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from user_form.gui.viewmodels import Dispatcher, FormField, FormState, UserFormViewModel
from user_form.gui.worker import SaveWorker
from user_form.store.models import UserRecord
from user_form.store.repository import UserRepository

__all__ = ["UserFormPage"]

logger = logging.getLogger(__name__)

# Column indices
_COL_ID    = 0
_COL_NAME  = 1
_COL_AGE   = 2
_COL_EMAIL = 3
_HEADERS = ["ID", "Name", "Age", "Email"]

_ERROR_STYLE   = "color: #b00020;"
_SUCCESS_STYLE = "color: #1b5e20;"


class UserFormPage(QWidget):
    """
    Form + record list.  Renders UserFormViewModel state and forwards edits.

    Record-feed emissions can arrive on a SaveWorker thread, so they are
    re-emitted through _records_received and rendered on the GUI thread.
    """

    _records_received = pyqtSignal(object)  # list[UserRecord]

    def __init__(
        self,
        repository: UserRepository,
        dispatch: Optional[Dispatcher] = None,
        parent: QWidget = None,
    ) -> None:
        super().__init__(parent)
        self._vm = UserFormViewModel(repository, dispatch or self._dispatch_in_thread)

        # Worker / thread pairs, held until the thread stops
        self._jobs: dict[SaveWorker, tuple[QThread, Callable, Callable]] = {}
        self._threads: list[tuple[QThread, SaveWorker]] = []

        self._build_ui()
        self._records_received.connect(self._render_records)
        self._state_sub   = self._vm.observe_state().subscribe(self._render_state)
        self._records_sub = self._vm.observe_records().subscribe(self._records_received.emit)

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        # Form
        layout.addWidget(QLabel("<b>New User</b>"))

        form = QFormLayout()
        self._name_edit  = QLineEdit()
        self._name_edit.setPlaceholderText("Full name")
        self._age_edit   = QLineEdit()
        self._age_edit.setPlaceholderText("Age")
        self._email_edit = QLineEdit()
        self._email_edit.setPlaceholderText("name@example.com")
        form.addRow("Name:",  self._name_edit)
        form.addRow("Age:",   self._age_edit)
        form.addRow("Email:", self._email_edit)
        layout.addLayout(form)

        self._name_edit.textChanged.connect(
            lambda text: self._vm.on_field_change(FormField.NAME, text)
        )
        self._age_edit.textChanged.connect(
            lambda text: self._vm.on_field_change(FormField.AGE, text)
        )
        self._email_edit.textChanged.connect(
            lambda text: self._vm.on_field_change(FormField.EMAIL, text)
        )

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        self._clear_btn = QPushButton("Clear")
        self._clear_btn.clicked.connect(self._vm.reset_form)
        self._save_btn  = QPushButton("Save")
        self._save_btn.clicked.connect(self._vm.save)
        btn_row.addWidget(self._clear_btn)
        btn_row.addWidget(self._save_btn)
        layout.addLayout(btn_row)

        self._status_label = QLabel("")
        self._status_label.setWordWrap(True)
        layout.addWidget(self._status_label)

        # Record list
        header_row = QHBoxLayout()
        header_row.addWidget(QLabel("<b>Registered Users</b>"))
        header_row.addStretch()
        self._count_label = QLabel("0")
        header_row.addWidget(self._count_label)
        layout.addLayout(header_row)

        self._table = QTableWidget(0, len(_HEADERS))
        self._table.setHorizontalHeaderLabels(_HEADERS)
        self._table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self._table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self._table.horizontalHeader().setStretchLastSection(True)
        layout.addWidget(self._table)

        self._empty_label = QLabel("No records yet")
        layout.addWidget(self._empty_label)

    # ── Rendering ──────────────────────────────────────────────────────────

    def _render_state(self, state: FormState) -> None:
        for edit, value in (
            (self._name_edit,  state.name),
            (self._age_edit,   state.age),
            (self._email_edit, state.email),
        ):
            # Programmatic updates must not loop back as field edits
            if edit.text() != value:
                edit.blockSignals(True)
                edit.setText(value)
                edit.blockSignals(False)
            edit.setEnabled(not state.is_saving)

        self._clear_btn.setEnabled(not state.is_saving)
        self._save_btn.setEnabled(not state.is_saving)
        self._save_btn.setText("Saving…" if state.is_saving else "Save")

        if state.error_message:
            self._status_label.setStyleSheet(_ERROR_STYLE)
            self._status_label.setText(state.error_message)
        elif state.success_message:
            self._status_label.setStyleSheet(_SUCCESS_STYLE)
            self._status_label.setText(state.success_message)
        else:
            self._status_label.setStyleSheet("")
            self._status_label.setText("")

    @pyqtSlot(object)
    def _render_records(self, records: list[UserRecord]) -> None:
        self._table.setRowCount(len(records))
        for row, rec in enumerate(records):
            self._table.setItem(row, _COL_ID,    QTableWidgetItem(str(rec.id or "")))
            self._table.setItem(row, _COL_NAME,  QTableWidgetItem(rec.name))
            self._table.setItem(row, _COL_AGE,   QTableWidgetItem(str(rec.age)))
            self._table.setItem(row, _COL_EMAIL, QTableWidgetItem(rec.email))
        self._count_label.setText(str(len(records)))
        self._empty_label.setVisible(not records)

    # ── Background saves ───────────────────────────────────────────────────

    def _dispatch_in_thread(
        self,
        job: Callable[[], int],
        on_success: Callable[[int], None],
        on_failure: Callable[[BaseException], None],
    ) -> None:
        """Run *job* on a QThread; callbacks fire back on the GUI thread."""
        self._prune_threads()

        worker = SaveWorker(job)
        thread = QThread()
        worker.moveToThread(thread)
        self._jobs[worker] = (thread, on_success, on_failure)
        self._threads.append((thread, worker))

        thread.started.connect(worker.run)
        worker.finished.connect(self._on_save_finished)
        worker.failed.connect(self._on_save_failed)
        worker.finished.connect(thread.quit)
        worker.failed.connect(thread.quit)

        thread.start()

    @pyqtSlot(int)
    def _on_save_finished(self, row_id: int) -> None:
        _, on_success, _ = self._jobs.pop(self.sender())
        on_success(row_id)

    @pyqtSlot(str)
    def _on_save_failed(self, message: str) -> None:
        worker = self.sender()
        _, _, on_failure = self._jobs.pop(worker)
        on_failure(worker.error)

    def _prune_threads(self) -> None:
        self._threads = [(t, w) for t, w in self._threads if t.isRunning()]

    # ── Public API ─────────────────────────────────────────────────────────

    @property
    def view_model(self) -> UserFormViewModel:
        return self._vm

    def shutdown(self) -> None:
        """Stop observing and let in-flight writes run to completion."""
        self._state_sub.cancel()
        self._records_sub.cancel()
        for thread, _ in self._threads:
            # quit() is queued behind the running job; exec() exits once it returns
            thread.quit()
            thread.wait()
        self._threads.clear()
