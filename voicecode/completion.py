from __future__ import annotations

import logging
import time
from typing import Iterable, Iterator, Protocol

from voicecode.config import VoicecodeConfig

try:
    from openai import OpenAI
except ImportError as e:  # pragma: no cover
    OpenAI = None  # type: ignore[assignment]
    _OPENAI_IMPORT_ERROR = e
else:
    _OPENAI_IMPORT_ERROR = None


logger = logging.getLogger(__name__)

_CLIENT_CACHE: dict[tuple[str, str], object] = {}


class CompletionError(RuntimeError):
    pass


class CompletionClient(Protocol):
    def stream(self, system_prompt: str, user_content: str) -> Iterable[str]: ...

    def complete(self, system_prompt: str, user_content: str) -> str: ...


def _openai_client(*, api_key: str, base_url: str) -> object:
    key = (api_key, base_url or "")
    cached = _CLIENT_CACHE.get(key)
    if cached is not None:
        return cached
    if OpenAI is None:
        raise RuntimeError(
            "openai is not installed; install it to use code generation "
            "(e.g. `pip install openai`)"
        ) from _OPENAI_IMPORT_ERROR
    kwargs: dict[str, str] = {"api_key": api_key}
    if base_url:
        kwargs["base_url"] = base_url
    client = OpenAI(**kwargs)
    _CLIENT_CACHE[key] = client
    return client


def _messages(system_prompt: str, user_content: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_content},
    ]


def _delta_text(part: object) -> str:
    choices = getattr(part, "choices", None) or []
    if not choices:
        return ""
    delta = getattr(choices[0], "delta", None)
    return getattr(delta, "content", None) or ""


class OpenAICompletionClient:
    """Chat completions against OpenAI (or any compatible `base_url`)."""

    def __init__(self, config: VoicecodeConfig, *, client: object | None = None) -> None:
        self.model = config.completion_model
        if client is None:
            client = _openai_client(api_key=config.require_api_key(), base_url=config.base_url or "")
        self.client = client

    def stream(self, system_prompt: str, user_content: str) -> Iterator[str]:
        """Yield content deltas as they arrive; role and finish chunks yield ""."""
        started = time.monotonic()
        try:
            response = self.client.chat.completions.create(  # type: ignore[attr-defined]
                model=self.model,
                messages=_messages(system_prompt, user_content),
                stream=True,
            )
        except Exception as e:
            raise CompletionError(f"Code generation request failed: {e}") from e
        try:
            for part in response:
                yield _delta_text(part)
        except Exception as e:
            raise CompletionError(f"Code generation request failed: {e}") from e
        finally:
            # Releases the HTTP connection when the consumer stops early.
            close = getattr(response, "close", None)
            if close is not None:
                close()
        logger.debug(
            "Streamed completion from %s in %dms", self.model, int((time.monotonic() - started) * 1000)
        )

    def complete(self, system_prompt: str, user_content: str) -> str:
        started = time.monotonic()
        try:
            response = self.client.chat.completions.create(  # type: ignore[attr-defined]
                model=self.model,
                messages=_messages(system_prompt, user_content),
            )
        except Exception as e:
            raise CompletionError(f"Code edit request failed: {e}") from e
        logger.debug(
            "Completion from %s in %dms", self.model, int((time.monotonic() - started) * 1000)
        )

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise CompletionError(f"Malformed completion response: {e}") from e
        if content is None:
            raise CompletionError("Completion response has no message content")
        return content
