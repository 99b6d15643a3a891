"""Logging setup for the voicecode CLI."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional


_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"


def _parse_log_level(level: Optional[str], *, default: int) -> int:
    if not level:
        return default
    normalized = str(level).strip().upper()
    if normalized.isdigit():
        return int(normalized)
    parsed = logging.getLevelName(normalized)
    if isinstance(parsed, int):
        return parsed
    return default


# HTTP client chatter from the provider SDKs; only shown under --debug.
PROVIDER_LOGGERS = ("openai", "httpx", "httpcore")


def _quiet_provider_loggers(level: int) -> None:
    provider_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in PROVIDER_LOGGERS:
        logging.getLogger(name).setLevel(provider_level)


def configure_logging(*, debug: bool = False, default_level: int = logging.WARNING) -> None:
    """Configure root logging.

    Precedence:
      1) `--debug` enables DEBUG.
      2) `VOICECODE_LOG_LEVEL` overrides the default.
      3) `default_level` otherwise.

    The openai/httpx loggers stay at WARNING or above unless debugging.
    """
    if debug:
        level = logging.DEBUG
    else:
        level = _parse_log_level(os.environ.get("VOICECODE_LOG_LEVEL"), default=default_level)

    root = logging.getLogger()
    root.setLevel(level)
    _quiet_provider_loggers(level)

    if root.handlers:
        for handler in root.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT, datefmt=_DEFAULT_DATEFMT))
    root.addHandler(handler)
