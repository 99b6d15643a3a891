"""Filesystem paths for voicecode runtime artifacts (the recorded audio).

Prefer `XDG_RUNTIME_DIR`, then `/run/user/$UID`, then a per-user directory
under the system temp dir.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


APP_NAME = "voicecode"

_PRIVATE_DIR_MODE = 0o700


def runtime_dir() -> Path:
    xdg_runtime_dir = os.environ.get("XDG_RUNTIME_DIR")
    if xdg_runtime_dir:
        candidate = Path(xdg_runtime_dir)
        if candidate.is_dir() and os.access(candidate, os.W_OK | os.X_OK):
            return candidate

    if hasattr(os, "getuid"):
        run_user_dir = Path("/run/user") / str(os.getuid())
        if run_user_dir.is_dir() and os.access(run_user_dir, os.W_OK | os.X_OK):
            return run_user_dir

    return Path(tempfile.gettempdir())


def runtime_app_dir(*, create: bool = False) -> Path:
    base = runtime_dir()
    if base == Path(tempfile.gettempdir()):
        user = os.environ.get("USER") or os.environ.get("USERNAME") or "user"
        path = base / f"{APP_NAME}-{user}"
    else:
        path = base / APP_NAME
    if create:
        path.mkdir(parents=True, exist_ok=True)
        try:
            os.chmod(path, _PRIVATE_DIR_MODE)
        except OSError:
            pass
    return path


def voice_input_path(*, create_dir: bool = True) -> Path:
    return runtime_app_dir(create=create_dir) / "voice_input.wav"
