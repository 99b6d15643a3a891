"""Configuration and environment loading for voicecode.

Settings come from the process environment, the canonical env file and an
optional local `.env`:
  ~/.config/voicecode/voicecode.env

`load_config()` is called once at startup; the resulting `VoicecodeConfig` is
immutable and handed explicitly to every collaborator that needs it.
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


APP_NAME = "voicecode"
DEFAULT_COMPLETION_MODEL = "gpt-4o-mini"
DEFAULT_TRANSCRIBE_MODEL = "whisper-1"
DEFAULT_SILENCE_SECONDS = 3.0
DEFAULT_SILENCE_THRESHOLD = 500.0
DEFAULT_MAX_RECORD_SECONDS = 60.0

_ENV_LOADED = False


class VoicecodeConfigError(RuntimeError):
    pass


def config_home() -> Path:
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home)
    return Path.home() / ".config"


def config_dir(*, create: bool = False) -> Path:
    path = config_home() / APP_NAME
    if create:
        path.mkdir(parents=True, exist_ok=True)
    return path


def env_file_path() -> Path:
    return config_dir() / f"{APP_NAME}.env"


def load_environment(*, load_cwd_dotenv: bool = True) -> None:
    """Load voicecode configuration into environment variables.

    Precedence:
    - Existing process env always wins.
    - Then `~/.config/voicecode/voicecode.env` (if present).
    - Then a local `.env` (optional).
    """

    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True

    env_path = env_file_path()
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)

    if load_cwd_dotenv:
        load_dotenv(override=False)


def _env(name: str) -> str:
    return (os.environ.get(name) or "").strip()


def _parse_float(raw: str, *, default: float) -> float:
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if value <= 0:
        return default
    return value


def get_openai_api_key(*, load_env: bool = True) -> str | None:
    """Return the OpenAI API key, or None when none is configured."""
    if load_env:
        load_environment()

    api_key = _env("OPENAI_API_KEY")
    if api_key:
        return api_key

    # systemd `LoadCredential=` exposes secrets as files here.
    cred_dir = os.environ.get("CREDENTIALS_DIRECTORY")
    if cred_dir:
        for name in ("openai_api_key", "OPENAI_API_KEY"):
            cred_path = Path(cred_dir) / name
            try:
                if cred_path.exists():
                    api_key = cred_path.read_text(encoding="utf-8").strip()
            except OSError:
                continue
            if api_key:
                return api_key
    return None


def get_base_url(*, load_env: bool = True) -> str | None:
    if load_env:
        load_environment()
    return _env("VOICECODE_BASE_URL") or _env("OPENAI_BASE_URL") or None


def get_completion_model(*, default: str = DEFAULT_COMPLETION_MODEL, load_env: bool = True) -> str:
    if load_env:
        load_environment()
    return _env("VOICECODE_COMPLETION_MODEL") or default


def get_transcribe_model(*, default: str = DEFAULT_TRANSCRIBE_MODEL, load_env: bool = True) -> str:
    if load_env:
        load_environment()
    return _env("VOICECODE_TRANSCRIBE_MODEL") or default


def get_live_server_command(*, load_env: bool = True) -> str | None:
    if load_env:
        load_environment()
    return _env("VOICECODE_LIVE_SERVER_COMMAND") or None


def get_device_index(*, load_env: bool = True) -> int | None:
    if load_env:
        load_environment()
    raw = _env("VOICECODE_DEVICE")
    return int(raw) if raw.isdigit() else None


@dataclass(frozen=True)
class VoicecodeConfig:
    api_key: str | None = None
    base_url: str | None = None
    completion_model: str = DEFAULT_COMPLETION_MODEL
    transcribe_model: str = DEFAULT_TRANSCRIBE_MODEL
    live_server_command: str | None = None
    silence_seconds: float = DEFAULT_SILENCE_SECONDS
    silence_threshold: float = DEFAULT_SILENCE_THRESHOLD
    max_record_seconds: float = DEFAULT_MAX_RECORD_SECONDS
    device_index: int | None = None

    def require_api_key(self) -> str:
        if self.api_key:
            return self.api_key
        raise VoicecodeConfigError(
            "OpenAI API key not found.\n\n"
            f"  Save it in: {env_file_path()}\n"
            "  Example line: OPENAI_API_KEY=sk-...\n\n"
            "Or set OPENAI_API_KEY in the current environment "
            "(`voicecode config set-api-key` writes the env file for you).\n"
        )


def load_config(*, load_env: bool = True) -> VoicecodeConfig:
    """Read every setting once and freeze it for the process lifetime."""
    if load_env:
        load_environment()
    return VoicecodeConfig(
        api_key=get_openai_api_key(load_env=False),
        base_url=get_base_url(load_env=False),
        completion_model=get_completion_model(load_env=False),
        transcribe_model=get_transcribe_model(load_env=False),
        live_server_command=get_live_server_command(load_env=False),
        silence_seconds=_parse_float(
            _env("VOICECODE_SILENCE_SECONDS"), default=DEFAULT_SILENCE_SECONDS
        ),
        silence_threshold=_parse_float(
            _env("VOICECODE_SILENCE_THRESHOLD"), default=DEFAULT_SILENCE_THRESHOLD
        ),
        max_record_seconds=_parse_float(
            _env("VOICECODE_MAX_RECORD_SECONDS"), default=DEFAULT_MAX_RECORD_SECONDS
        ),
        device_index=get_device_index(load_env=False),
    )


def _atomic_write(path: Path, content: str) -> None:
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(content, encoding="utf-8")
    os.replace(tmp_path, path)


def ensure_private_path(path: Path, mode: int) -> None:
    """Best-effort chmod; unsupported filesystems are ignored."""
    try:
        os.chmod(path, mode)
    except OSError:
        pass


def upsert_env_var(
    name: str,
    value: str,
    *,
    path: Optional[Path] = None,
    file_mode: int = 0o600,
    dir_mode: int = 0o700,
) -> Path:
    """Set or replace `name=value` in the env file and return its path."""

    if "\n" in value or "\r" in value:
        raise ValueError("invalid value: must be single-line")

    env_path = env_file_path() if path is None else Path(path)
    env_path.parent.mkdir(parents=True, exist_ok=True)
    ensure_private_path(env_path.parent, dir_mode)

    lines: list[str] = []
    if env_path.exists():
        lines = env_path.read_text(encoding="utf-8").splitlines(True)

    def _key_of(raw_line: str) -> str | None:
        stripped = raw_line.strip()
        if not stripped or stripped.startswith("#"):
            return None
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :].lstrip()
        key, sep, _rest = stripped.partition("=")
        return key.strip() if sep else None

    rendered = f"{name}={value}\n"
    replaced = False
    out: list[str] = []
    for line in lines:
        if _key_of(line) == name:
            out.append(rendered)
            replaced = True
        else:
            out.append(line)

    if not replaced:
        if out and not out[-1].endswith("\n"):
            out[-1] += "\n"
        out.append(rendered)

    _atomic_write(env_path, "".join(out))
    ensure_private_path(env_path, file_mode)
    os.environ.setdefault(name, value)
    return env_path


def env_file_permissions_ok(path: Optional[Path] = None) -> Optional[bool]:
    env_path = env_file_path() if path is None else Path(path)
    try:
        st = env_path.stat()
    except OSError:
        return None
    return stat.S_IMODE(st.st_mode) == 0o600
