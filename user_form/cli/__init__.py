"""
cli — command-line interface for user-form.

Entry points
────────────
  python -m user_form   (via user_form/__main__.py)
  user-form             (via pyproject.toml [project.scripts])

Subcommands: gui | add | list
"""

from user_form.cli.main import build_parser, cmd_add, cmd_list, main

__all__ = ["build_parser", "cmd_add", "cmd_list", "main"]
