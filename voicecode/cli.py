"""Command-line interface for voicecode."""

from __future__ import annotations

import click

from voicecode.commands import register
from voicecode.logging_utils import configure_logging


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def main(debug: bool) -> None:
    """voicecode - speak editor commands and stream generated code into files."""
    configure_logging(debug=debug)


register(main)


if __name__ == "__main__":
    main()
