"""
SaveWorker — runs one record insert in a background thread.

Usage (UserFormPage)::

    thread = QThread()
    worker = SaveWorker(job)
    worker.moveToThread(thread)
    thread.started.connect(worker.run)
    worker.finished.connect(self._on_save_finished)
    worker.failed.connect(self._on_save_failed)
    worker.finished.connect(thread.quit)
    worker.failed.connect(thread.quit)
    thread.start()

Signals
───────
finished(int) — id assigned to the inserted record
failed(str)   — human-readable error message
"""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

__all__ = ["SaveWorker"]

logger = logging.getLogger(__name__)


class SaveWorker(QObject):
    """
    Wraps a save job for execution in a QThread.

    All interaction with the GUI must go through signals — never touch
    Qt widgets from inside run().
    """

    finished = pyqtSignal(int)  # assigned record id
    failed   = pyqtSignal(str)  # error message

    def __init__(self, job: Callable[[], int]) -> None:
        super().__init__()
        self._job = job
        # Filled by run() so the GUI thread can hand the original exception on
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        """Entry point — connect QThread.started to this slot."""
        try:
            row_id = self._job()
        except Exception as exc:  # noqa: BLE001
            logger.exception("SaveWorker.run() failed")
            self.error = exc
            self.failed.emit(str(exc))
            return
        self.finished.emit(row_id)
