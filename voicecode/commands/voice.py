"""`voicecode listen|run|transcribe-file`: execute a voice command."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from voicecode.config import load_config
from voicecode.notify import ConsoleNotifier
from voicecode.paths import voice_input_path
from voicecode.pipeline import run_audio_file, run_transcript
from voicecode.recorder import SilenceRecorder

from ._session import build_dispatcher, emit_result, session_options


logger = logging.getLogger(__name__)


@click.command("listen")
@session_options
@click.option("--language", help="Language code for transcription (e.g., en, es, fr).")
def listen(
    workspaces: tuple[Path, ...],
    document: Path | None,
    cursor: int | None,
    json_: bool,
    language: str | None,
) -> None:
    """Record until you stop speaking, then run the spoken command."""
    config = load_config()
    notifier = ConsoleNotifier()
    dispatcher = build_dispatcher(workspaces, document, cursor, config=config, notifier=notifier)

    notifier.info("Listening...")
    audio_file = str(voice_input_path())
    try:
        SilenceRecorder.from_config(config).record(audio_file)
    except RuntimeError as e:
        raise click.ClickException(str(e)) from e

    result = run_audio_file(
        audio_file, dispatcher=dispatcher, notifier=notifier, config=config, language=language
    )
    emit_result(result, json_=json_)


@click.command("run")
@session_options
@click.argument("words", nargs=-1, required=True)
def run(
    workspaces: tuple[Path, ...],
    document: Path | None,
    cursor: int | None,
    json_: bool,
    words: tuple[str, ...],
) -> None:
    """Run a typed transcript as if it had been spoken."""
    notifier = ConsoleNotifier()
    dispatcher = build_dispatcher(workspaces, document, cursor, notifier=notifier)
    result = run_transcript(" ".join(words), dispatcher=dispatcher, notifier=notifier)
    emit_result(result, json_=json_)


@click.command("transcribe-file")
@session_options
@click.argument("audio_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option("--language", help="Language code for transcription (e.g., en, es, fr).")
def transcribe_file(
    workspaces: tuple[Path, ...],
    document: Path | None,
    cursor: int | None,
    json_: bool,
    audio_file: str,
    language: str | None,
) -> None:
    """Transcribe an existing audio file and run the command it contains."""
    config = load_config()
    notifier = ConsoleNotifier()
    dispatcher = build_dispatcher(workspaces, document, cursor, config=config, notifier=notifier)
    result = run_audio_file(
        audio_file, dispatcher=dispatcher, notifier=notifier, config=config, language=language
    )
    emit_result(result, json_=json_)
