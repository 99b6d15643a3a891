"""Speech-to-text through the OpenAI audio transcription API."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from voicecode.config import VoicecodeConfig

try:
    from openai import OpenAI
except ImportError as e:  # pragma: no cover
    OpenAI = None  # type: ignore[assignment]
    _OPENAI_IMPORT_ERROR = e
else:
    _OPENAI_IMPORT_ERROR = None


logger = logging.getLogger(__name__)


class TranscriptionError(RuntimeError):
    pass


class WhisperTranscriber:
    """Handles transcription using OpenAI's Whisper API."""

    def __init__(self, config: VoicecodeConfig, *, client: object | None = None) -> None:
        self.model = config.transcribe_model
        if client is None:
            if OpenAI is None:
                raise RuntimeError(
                    "openai is not installed; install it to use transcription "
                    "(e.g. `pip install openai`)"
                ) from _OPENAI_IMPORT_ERROR
            kwargs: dict[str, str] = {"api_key": config.require_api_key()}
            if config.base_url:
                kwargs["base_url"] = config.base_url
            client = OpenAI(**kwargs)
        self.client = client

    def transcribe(
        self,
        audio_file: str,
        language: Optional[str] = None,
        prompt: Optional[str] = None,
        temperature: float = 0.0,
    ) -> str:
        params: dict[str, object] = {
            "model": self.model,
            "response_format": "text",
            "temperature": temperature,
        }
        if language:
            params["language"] = language
        if prompt:
            params["prompt"] = prompt

        try:
            with open(audio_file, "rb") as f:
                transcript = self.client.audio.transcriptions.create(file=f, **params)  # type: ignore[attr-defined]
        except Exception as e:
            raise TranscriptionError(f"Transcription failed: {e}") from e

        # response_format="text" returns a plain string; older SDKs return an object.
        text = transcript if isinstance(transcript, str) else getattr(transcript, "text", "")
        return (text or "").strip()


def transcribe_audio_file(
    audio_file: str,
    *,
    config: VoicecodeConfig,
    language: Optional[str] = None,
    transcriber: WhisperTranscriber | None = None,
) -> str:
    """Transcribe an on-disk audio file."""
    if not Path(audio_file).is_file():
        raise TranscriptionError(f"Audio file not found: {audio_file}")

    if transcriber is None:
        try:
            transcriber = WhisperTranscriber(config)
        except Exception as e:
            raise TranscriptionError(str(e)) from e

    text = transcriber.transcribe(audio_file, language=language)
    logger.info("Transcript: %s", text)
    return text
