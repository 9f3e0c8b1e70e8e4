"""
Unit tests for user_form/gui/ Qt widgets — requires PyQt6 + offscreen display.

Run with: QT_QPA_PLATFORM=offscreen pytest tests/unit/test_gui_widgets.py

Coverage plan
─────────────
MainWindow      → 2 tests
UserFormPage    → 7 tests
SaveWorker      → 2 tests
Threaded save   → 3 tests (success, failure, shutdown mid-write)
─────────────────────────────────
Total           = 14 tests
"""

import os
import threading
from unittest.mock import MagicMock

import pytest

# Ensure offscreen rendering when no display is available
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

PyQt6 = pytest.importorskip("PyQt6", reason="PyQt6 not installed")


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def make_window(tmp_path, qtbot):
    """Build a MainWindow on a temp database; inline saves unless told otherwise."""
    from user_form.gui.main_window import MainWindow
    from user_form.gui.viewmodels import run_inline

    windows = []  # strong refs: qtbot.addWidget only keeps a weakref

    def _make(dispatch=run_inline):
        win = MainWindow(db_path=str(tmp_path / "gui.db"), dispatch=dispatch)
        qtbot.addWidget(win)
        windows.append(win)
        return win

    return _make


def _type(page, name="Ana", age="30", email="ana@x.com"):
    page._name_edit.setText(name)
    page._age_edit.setText(age)
    page._email_edit.setText(email)


# ─────────────────────────────────────────────────────────────────────────────
# 1. MainWindow
# ─────────────────────────────────────────────────────────────────────────────

class TestMainWindow:

    def test_creates_without_error(self, make_window):
        assert make_window() is not None

    def test_central_widget_is_form_page(self, make_window):
        from user_form.gui.pages.user_form import UserFormPage
        win = make_window()
        assert isinstance(win.centralWidget(), UserFormPage)


# ─────────────────────────────────────────────────────────────────────────────
# 2. UserFormPage
# ─────────────────────────────────────────────────────────────────────────────

class TestUserFormPage:

    def test_has_three_inputs_and_a_table(self, make_window):
        from PyQt6.QtWidgets import QLineEdit, QTableWidget
        page = make_window().page
        assert len(page.findChildren(QLineEdit)) == 3
        assert len(page.findChildren(QTableWidget)) == 1

    def test_has_save_and_clear_buttons(self, make_window):
        from PyQt6.QtWidgets import QPushButton
        page = make_window().page
        labels = [b.text().lower() for b in page.findChildren(QPushButton)]
        assert "save" in labels
        assert "clear" in labels

    def test_typing_updates_view_model(self, make_window):
        page = make_window().page
        _type(page, "Ana", "30", "ana@x.com")
        state = page.view_model.state
        assert (state.name, state.age, state.email) == ("Ana", "30", "ana@x.com")

    def test_save_clears_inputs_and_lists_record(self, make_window):
        page = make_window().page
        assert not page._empty_label.isHidden()
        _type(page)
        page._save_btn.click()

        assert page._status_label.text() == "record saved"
        assert page._name_edit.text() == ""
        assert page._table.rowCount() == 1
        assert page._table.item(0, 1).text() == "Ana"
        assert page._count_label.text() == "1"
        assert page._empty_label.isHidden()

    def test_newest_record_shown_first(self, make_window):
        page = make_window().page
        _type(page, name="A")
        page._save_btn.click()
        _type(page, name="B")
        page._save_btn.click()
        assert page._table.item(0, 1).text() == "B"
        assert page._table.item(1, 1).text() == "A"

    def test_invalid_save_shows_error_and_keeps_input(self, make_window):
        page = make_window().page
        _type(page, "Ana", "abc", "ana@x.com")
        page._save_btn.click()
        assert page._status_label.text() == "age must be a positive integer"
        assert page._age_edit.text() == "abc"
        assert page._table.rowCount() == 0

    def test_inputs_disabled_while_saving(self, make_window):
        pending = []
        page = make_window(dispatch=lambda job, ok, fail: pending.append((job, ok))).page
        _type(page)
        page._save_btn.click()

        assert not page._save_btn.isEnabled()
        assert not page._name_edit.isEnabled()
        assert page._save_btn.text() == "Saving…"

        job, ok = pending.pop()
        ok(job())
        assert page._save_btn.isEnabled()
        assert page._save_btn.text() == "Save"
        assert page._table.rowCount() == 1


# ─────────────────────────────────────────────────────────────────────────────
# 3. SaveWorker
# ─────────────────────────────────────────────────────────────────────────────

class TestSaveWorker:
    """SaveWorker — runs the insert job, emits signals."""

    def test_worker_emits_finished_on_success(self, qtbot):
        from user_form.gui.worker import SaveWorker
        worker = SaveWorker(lambda: 42)
        results = []
        worker.finished.connect(lambda row_id: results.append(row_id))
        worker.run()
        assert results == [42]

    def test_worker_emits_failed_on_exception(self, qtbot):
        from user_form.exceptions import StorageError
        from user_form.gui.worker import SaveWorker

        def job():
            raise StorageError("boom")

        worker = SaveWorker(job)
        errors = []
        worker.failed.connect(lambda e: errors.append(e))
        worker.run()
        assert errors == ["boom"]
        assert isinstance(worker.error, StorageError)


# ─────────────────────────────────────────────────────────────────────────────
# 4. Threaded save (default dispatcher)
# ─────────────────────────────────────────────────────────────────────────────

class TestThreadedSave:

    def test_background_save_completes_on_gui_thread(self, make_window, qtbot):
        win = make_window(dispatch=None)
        page = win.page
        _type(page)
        page._save_btn.click()

        qtbot.waitUntil(
            lambda: page.view_model.state.success_message == "record saved",
            timeout=5000,
        )
        qtbot.waitUntil(lambda: page._table.rowCount() == 1, timeout=5000)
        assert page.view_model.state.is_saving is False
        win.close()

    def test_background_save_failure_keeps_inputs(self, qtbot):
        from user_form.exceptions import StorageError
        from user_form.feed import LiveFeed
        from user_form.gui.pages.user_form import UserFormPage
        fake = MagicMock()
        fake.insert.side_effect = StorageError("database is locked")
        fake.list_all.return_value = LiveFeed(lambda: [], release_after=None)
        page = UserFormPage(fake)
        qtbot.addWidget(page)
        _type(page, "Ana", "30", "ana@x.com")
        page._save_btn.click()

        qtbot.waitUntil(lambda: page.view_model.state.error_message is not None, timeout=5000)
        assert "database is locked" in page._status_label.text()
        assert (page._name_edit.text(), page._age_edit.text(), page._email_edit.text()) == (
            "Ana", "30", "ana@x.com",
        )
        assert page.view_model.state.is_saving is False
        assert page._save_btn.isEnabled()
        page.shutdown()

    def test_shutdown_waits_for_write_in_flight(self, tmp_path, qtbot):
        from user_form.gui.pages.user_form import UserFormPage
        from user_form.store.db import UserStore
        from user_form.store.repository import UserRepository
        store = UserStore(db_path=str(tmp_path / "inflight.db"), release_after=0)
        inner = UserRepository(store)
        started, gate = threading.Event(), threading.Event()

        class GatedRepository:
            def insert(self, record):
                started.set()
                gate.wait(5)
                return inner.insert(record)

            def list_all(self):
                return inner.list_all()

        page = UserFormPage(GatedRepository())
        qtbot.addWidget(page)
        _type(page)
        page._save_btn.click()
        assert started.wait(2)

        threading.Timer(0.1, gate.set).start()
        page.shutdown()

        assert len(store.all_users()) == 1
        assert page._threads == []
        store.close()
