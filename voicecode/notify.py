"""User-visible notices."""

from __future__ import annotations

from typing import Protocol

import click


class Notifier(Protocol):
    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleNotifier:
    """Print notices to stderr so stdout stays clean for `--json`."""

    def __init__(self, *, quiet: bool = False) -> None:
        self.quiet = bool(quiet)

    def info(self, message: str) -> None:
        if not self.quiet:
            click.echo(message, err=True)

    def error(self, message: str) -> None:
        click.secho(message, fg="red", err=True)
