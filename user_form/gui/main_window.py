"""
MainWindow — top-level application window for the user-form GUI.

Builds the object graph explicitly, leaf first:

    UserStore(db_path) → UserRepository(store) → UserFormPage(repository)

and hosts the page as the central widget.
"""

import logging
from typing import Optional

from PyQt6.QtGui import QCloseEvent
from PyQt6.QtWidgets import QMainWindow, QWidget

from user_form.gui.pages.user_form import UserFormPage
from user_form.gui.viewmodels import Dispatcher
from user_form.store.db import DEFAULT_DB_PATH, UserStore
from user_form.store.repository import UserRepository

__all__ = ["MainWindow"]

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Root window: owns the store and the form page."""

    def __init__(
        self,
        db_path: Optional[str] = None,
        dispatch: Optional[Dispatcher] = None,
        parent: QWidget = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("User Registry")
        self.resize(520, 640)

        self._store = UserStore(db_path or DEFAULT_DB_PATH)
        logger.info("Using database %s", self._store.db_path)
        self._repository = UserRepository(self._store)

        self._page = UserFormPage(self._repository, dispatch=dispatch)
        self.setCentralWidget(self._page)

    @property
    def page(self) -> UserFormPage:
        return self._page

    def closeEvent(self, event: QCloseEvent) -> None:
        """Wait for pending writes, then release the store."""
        self._page.shutdown()
        self._store.close()
        super().closeEvent(event)
