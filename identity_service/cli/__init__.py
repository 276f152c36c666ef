"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .directory import directory_cli


def init_app(app: Flask) -> None:
    """Register application-specific CLI command groups.

    Parameters
    ----------
    app:
        Flask application instance whose CLI registry will receive the
        ``directory`` command group.
    """
    app.cli.add_command(directory_cli)
