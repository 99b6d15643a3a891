"""`voicecode classify|context`: look at what a command would see."""

from __future__ import annotations

import json
from pathlib import Path

import click

from voicecode.context import build_workspace_context
from voicecode.editor import LocalWorkspace
from voicecode.intent_router import route_intent

from ._session import workspace_option


@click.command("classify")
@click.argument("words", nargs=-1, required=True)
@click.option("-j", "--json", "json_", is_flag=True, help="Output the intent as JSON.")
def classify(words: tuple[str, ...], json_: bool) -> None:
    """Show the intent a transcript resolves to, without running it."""
    intent = route_intent(" ".join(words))
    if json_:
        click.echo(json.dumps(intent.to_dict(), ensure_ascii=False))
        return
    click.echo(f"{intent.kind}\t{intent.argument}")


@click.command("context")
@workspace_option
def context(workspaces: tuple[Path, ...]) -> None:
    """Print the workspace context blob sent with generation requests."""
    folders = list(workspaces) or [Path.cwd()]
    click.echo(build_workspace_context(LocalWorkspace(folders)), nl=False)
