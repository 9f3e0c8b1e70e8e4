"""
CLI entry point for user-form.

Usage
─────
  # Open the form window (default)
  python -m user_form
  python -m user_form --db ./users.db gui

  # Add a record without the GUI (same validation as the form)
  python -m user_form add --name "Ana" --age 30 --email ana@x.com

  # List stored records, newest first
  python -m user_form list

Subcommands are implemented as standalone functions (cmd_add, cmd_list,
cmd_gui) so they can be unit-tested without invoking argparse.
"""

import argparse
import logging
import sys
from typing import Optional

from user_form.gui.viewmodels import FormField, UserFormViewModel, run_inline
from user_form.store.db import DEFAULT_DB_PATH, UserStore
from user_form.store.repository import UserRepository

__all__ = ["build_parser", "cmd_add", "cmd_list", "cmd_gui", "main"]

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: gui | add | list
    """
    parser = argparse.ArgumentParser(
        prog="user-form",
        description="Local user registry with a validated entry form",
    )
    parser.add_argument(
        "--db",
        default=DEFAULT_DB_PATH,
        metavar="PATH",
        help=f"SQLite database path (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )

    sub = parser.add_subparsers(dest="subcommand")

    # ── gui ───────────────────────────────────────────────────────────────
    sub.add_parser("gui", help="Open the form window (default)")

    # ── add ───────────────────────────────────────────────────────────────
    add = sub.add_parser("add", help="Validate and store one record")
    add.add_argument("--name", default="", metavar="NAME", help="User name")
    add.add_argument("--age", default="", metavar="AGE", help="Positive integer age")
    add.add_argument("--email", default="", metavar="EMAIL", help="Email address")

    # ── list ──────────────────────────────────────────────────────────────
    sub.add_parser("list", help="List stored records, newest first")

    return parser


# ── Command implementations ───────────────────────────────────────────────────


def cmd_add(repository: UserRepository, name: str, age: str, email: str) -> int:
    """
    Drive the form view model headlessly: fill the fields, then save.

    Returns:
        0 on success, 1 if validation or the write failed.
    """
    vm = UserFormViewModel(repository, dispatch=run_inline)
    vm.on_field_change(FormField.NAME, name)
    vm.on_field_change(FormField.AGE, age)
    vm.on_field_change(FormField.EMAIL, email)
    vm.save()

    state = vm.state
    if state.error_message:
        print(f"Error: {state.error_message}", file=sys.stderr)
        return 1
    print(state.success_message)
    return 0


def cmd_list(store: UserStore) -> None:
    """Print stored records to stdout, newest first."""
    records = store.all_users()
    if not records:
        print("0 records found.")
        return
    for rec in records:
        tag = f"[{rec.id:>4}]"
        print(f"{tag}  {rec.name:<30} {rec.age:>4}  {rec.email}")


def cmd_gui(db_path: str) -> int:
    """Open the main window and run the Qt event loop until it closes."""
    from PyQt6.QtWidgets import QApplication
    from user_form.gui.main_window import MainWindow

    app = QApplication.instance() or QApplication(sys.argv)
    win = MainWindow(db_path=db_path)
    win.show()
    return app.exec()


# ── Entry point ───────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.debug else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    if ns.subcommand in (None, "gui"):
        return cmd_gui(ns.db)

    store = UserStore(db_path=ns.db)
    try:
        if ns.subcommand == "list":
            cmd_list(store=store)
            return 0

        if ns.subcommand == "add":
            return cmd_add(
                repository=UserRepository(store),
                name=ns.name,
                age=ns.age,
                email=ns.email,
            )
    finally:
        store.close()

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
