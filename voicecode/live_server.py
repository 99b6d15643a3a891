from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from pathlib import Path


logger = logging.getLogger(__name__)

DEFAULT_LIVE_SERVER_PORT = 5500


def default_live_server_command() -> list[str]:
    return [sys.executable, "-m", "http.server", str(DEFAULT_LIVE_SERVER_PORT)]


class LiveServerLauncher:
    """Start a live-reload/static server for the workspace without waiting on it.

    The child runs in its own session and outlives voicecode; the returned
    handle is only kept for its pid.
    """

    def __init__(self, command: str | None = None, *, cwd: Path | None = None) -> None:
        self.argv = shlex.split(command) if command else default_live_server_command()
        self.cwd = cwd

    def start(self) -> subprocess.Popen:
        logger.info("Starting live server: %s", shlex.join(self.argv))
        proc = subprocess.Popen(
            self.argv,
            cwd=str(self.cwd) if self.cwd is not None else None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        logger.info("Live server running detached (pid %s)", proc.pid)
        return proc
