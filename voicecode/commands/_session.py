"""Options and wiring shared by the commands that execute voice commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable

import click

from voicecode.config import VoicecodeConfig, load_config
from voicecode.dispatcher import CommandDispatcher
from voicecode.editor import LocalWorkspace, TextDocument
from voicecode.notify import ConsoleNotifier
from voicecode.pipeline import VoiceCommandResult


workspace_option = click.option(
    "-w",
    "--workspace",
    "workspaces",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Workspace folder (repeatable; the first one is used). Defaults to the current directory.",
)

_SESSION_OPTIONS = (
    workspace_option,
    click.option(
        "-d",
        "--document",
        type=click.Path(dir_okay=False, path_type=Path),
        help="File to treat as the active document.",
    ),
    click.option(
        "--cursor",
        type=click.IntRange(min=0),
        help="Cursor offset in the active document (default: end of file).",
    ),
    click.option("-j", "--json", "json_", is_flag=True, help="Output the result as JSON."),
)


def session_options(fn: Callable) -> Callable:
    for option in reversed(_SESSION_OPTIONS):
        fn = option(fn)
    return fn


def build_dispatcher(
    workspaces: tuple[Path, ...],
    document: Path | None,
    cursor: int | None,
    *,
    config: VoicecodeConfig | None = None,
    notifier: ConsoleNotifier | None = None,
) -> CommandDispatcher:
    folders = list(workspaces) or [Path.cwd()]
    active = TextDocument.load(document, cursor=cursor) if document is not None else None
    return CommandDispatcher(
        LocalWorkspace(folders),
        notifier or ConsoleNotifier(),
        document=active,
        config=config or load_config(),
    )


def emit_result(result: VoiceCommandResult, *, json_: bool) -> None:
    if json_:
        click.echo(json.dumps(result.to_payload(), ensure_ascii=False))
    if not result.ok:
        sys.exit(1)
