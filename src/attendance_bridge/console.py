"""
Diagnostic output.

stdout is reserved for the single JSON result line, so everything here
goes to stderr.
"""

from __future__ import annotations

import click

PREFIX = "attendance-bridge:"


def note(message: str) -> None:
    click.echo(f"{PREFIX} {message}", err=True)


def fail(message: str) -> None:
    click.secho(f"{PREFIX} ERROR {message}", fg="red", err=True)


def detail(text: str) -> None:
    """Write a multi-line block (e.g. a traceback) verbatim."""
    click.echo(text.rstrip("\n"), err=True)
