"""
gui — PyQt6 front-end for the user form.

Public API
──────────
viewmodels             — pure-Python form state and controller (no Qt)
main_window.MainWindow — top-level application window
pages.user_form        — the form / record list page
worker.SaveWorker      — background insert for the page
"""

from user_form.gui import viewmodels

__all__ = ["viewmodels"]
