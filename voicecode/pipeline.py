from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

from voicecode.config import VoicecodeConfig
from voicecode.dispatcher import CommandDispatcher, DispatchResult
from voicecode.intent_router import Intent, normalize_transcript, route_intent
from voicecode.notify import Notifier
from voicecode.transcription import TranscriptionError, WhisperTranscriber, transcribe_audio_file


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoiceCommandResult:
    ok: bool
    stage: str
    transcript: str | None
    intent: Intent | None = None
    dispatch: DispatchResult | None = None
    error: str | None = None
    timing: dict[str, int] | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "ok": bool(self.ok),
            "stage": self.stage,
            "transcript": self.transcript,
            "intent": self.intent.to_dict() if self.intent is not None else None,
            "error": self.error,
        }
        if self.dispatch is not None:
            payload["dispatch"] = self.dispatch.to_payload()
        if self.timing is not None:
            payload["timing"] = self.timing
        return payload


def run_transcript(
    text: str | None,
    *,
    dispatcher: CommandDispatcher,
    notifier: Notifier,
) -> VoiceCommandResult:
    """Classify a transcript and dispatch it. An empty transcript does nothing."""
    transcript = normalize_transcript(text)
    if not transcript:
        return VoiceCommandResult(ok=True, stage="empty", transcript="")

    notifier.info(f"Heard: {transcript}")
    intent = route_intent(transcript)
    logger.debug("Intent: %s", intent)

    result = dispatcher.dispatch(intent)
    return VoiceCommandResult(
        ok=result.ok,
        stage=result.stage,
        transcript=transcript,
        intent=intent,
        dispatch=result,
        error=result.error,
        timing=result.timing,
    )


def run_audio_file(
    audio_file: str,
    *,
    dispatcher: CommandDispatcher,
    notifier: Notifier,
    config: VoicecodeConfig,
    language: str | None = None,
    transcriber: WhisperTranscriber | None = None,
) -> VoiceCommandResult:
    """Transcribe `audio_file` and run the command it contains.

    A transcription failure aborts only this command.
    """
    notifier.info("Processing speech...")
    started = time.monotonic()
    try:
        text = transcribe_audio_file(
            audio_file, config=config, language=language, transcriber=transcriber
        )
    except TranscriptionError as e:
        logger.error("Transcription failed: %s", e)
        notifier.error(str(e))
        return VoiceCommandResult(ok=False, stage="transcribe", transcript=None, error=str(e))
    transcribe_ms = int((time.monotonic() - started) * 1000)

    result = run_transcript(text, dispatcher=dispatcher, notifier=notifier)
    timing = dict(result.timing or {})
    timing["transcribe_ms"] = transcribe_ms
    return VoiceCommandResult(
        ok=result.ok,
        stage=result.stage,
        transcript=result.transcript,
        intent=result.intent,
        dispatch=result.dispatch,
        error=result.error,
        timing=timing,
    )
