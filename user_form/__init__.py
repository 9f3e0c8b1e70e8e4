"""
user_form — single-screen user registry backed by a local SQLite file.

Subpackages
───────────
store  — UserRecord, UserStore, UserRepository
gui    — PyQt6 window, page, worker and Qt-free view models
cli    — launcher and headless add / list commands
"""
