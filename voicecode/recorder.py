"""Microphone capture that stops once the speaker goes quiet."""

from __future__ import annotations

import logging
import queue
import wave

try:
    import sounddevice as sd
except ImportError:  # pragma: no cover
    sd = None

import numpy as np

from voicecode.config import VoicecodeConfig


logger = logging.getLogger(__name__)


def _require_sounddevice() -> None:
    if sd is None:
        raise RuntimeError(
            "sounddevice is not installed; install it to record audio (e.g. `pip install sounddevice`)"
        )


def block_rms(block: np.ndarray) -> float:
    """Root-mean-square amplitude of an int16 audio block."""
    if block.size == 0:
        return 0.0
    samples = block.astype(np.float64)
    return float(np.sqrt(np.mean(np.square(samples))))


class SilenceDetector:
    """Decide when to stop: after speech, once `silence_seconds` pass below threshold.

    Leading silence before the first loud block does not count. `max_seconds`
    caps the total recording either way.
    """

    def __init__(self, *, threshold: float, silence_seconds: float, max_seconds: float) -> None:
        self.threshold = float(threshold)
        self.silence_seconds = float(silence_seconds)
        self.max_seconds = float(max_seconds)
        self.elapsed = 0.0
        self.silent_for = 0.0
        self.heard_speech = False

    def update(self, rms: float, seconds: float) -> bool:
        """Account for one block; return True when recording should stop."""
        self.elapsed += seconds
        if rms >= self.threshold:
            self.heard_speech = True
            self.silent_for = 0.0
        elif self.heard_speech:
            self.silent_for += seconds

        if self.elapsed >= self.max_seconds:
            return True
        return self.heard_speech and self.silent_for >= self.silence_seconds


class SilenceRecorder:
    """Record mono 16 kHz int16 audio into a WAV file until silence."""

    def __init__(
        self,
        device_index: int | None = None,
        *,
        threshold: float,
        silence_seconds: float,
        max_seconds: float,
        rate: int = 16000,
        blocksize: int = 1024,
    ) -> None:
        self.device_index = device_index
        self.threshold = threshold
        self.silence_seconds = silence_seconds
        self.max_seconds = max_seconds
        self.rate = int(rate)
        self.channels = 1
        self.blocksize = int(blocksize)
        self.audio_queue: queue.Queue[np.ndarray] = queue.Queue()

    @classmethod
    def from_config(cls, config: VoicecodeConfig) -> "SilenceRecorder":
        return cls(
            config.device_index,
            threshold=config.silence_threshold,
            silence_seconds=config.silence_seconds,
            max_seconds=config.max_record_seconds,
        )

    def _audio_callback(self, indata, frames, time_info, status) -> None:
        if status:
            logger.debug("Audio callback status: %s", status)
        self.audio_queue.put(indata.copy())

    def record(self, output_file: str) -> str:
        _require_sounddevice()
        detector = SilenceDetector(
            threshold=self.threshold,
            silence_seconds=self.silence_seconds,
            max_seconds=self.max_seconds,
        )
        frames: list[bytes] = []
        try:
            with sd.InputStream(
                device=self.device_index,
                channels=self.channels,
                samplerate=self.rate,
                dtype=np.int16,
                callback=self._audio_callback,
                blocksize=self.blocksize,
            ):
                while True:
                    block = self.audio_queue.get(timeout=5.0)
                    frames.append(block.tobytes())
                    if detector.update(block_rms(block), len(block) / self.rate):
                        break
        except queue.Empty as e:
            raise RuntimeError("No audio received from the input device") from e
        except sd.PortAudioError as e:
            raise RuntimeError(f"Failed to record audio: {e}") from e

        logger.info("Recorded %.1fs of audio to %s", detector.elapsed, output_file)
        self.save_to_file(b"".join(frames), output_file)
        return output_file

    def save_to_file(self, data: bytes, filepath: str) -> None:
        with wave.open(filepath, "wb") as wf:
            wf.setnchannels(self.channels)
            wf.setsampwidth(2)
            wf.setframerate(self.rate)
            wf.writeframes(data)
