"""Click commands for the voicecode CLI."""

from __future__ import annotations

import click

from .config import config_group
from .preview import classify, context
from .voice import listen, run, transcribe_file


def register(main: click.Group) -> None:
    main.add_command(config_group)

    main.add_command(listen)
    main.add_command(run)
    main.add_command(transcribe_file)

    main.add_command(classify)
    main.add_command(context)
