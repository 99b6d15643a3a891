from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pytest

import voicecode.config as config
from voicecode.editor import LocalWorkspace, TextDocument


@pytest.fixture()
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate $HOME + XDG dirs so tests never touch real user files."""
    home = tmp_path / "home"
    home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))

    runtime = tmp_path / "runtime"
    runtime.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(runtime))

    # Avoid leaking developer/user config into tests.
    for name in (
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "CREDENTIALS_DIRECTORY",
        "XDG_CONFIG_HOME",
        "VOICECODE_BASE_URL",
        "VOICECODE_COMPLETION_MODEL",
        "VOICECODE_TRANSCRIBE_MODEL",
        "VOICECODE_LIVE_SERVER_COMMAND",
        "VOICECODE_SILENCE_SECONDS",
        "VOICECODE_SILENCE_THRESHOLD",
        "VOICECODE_MAX_RECORD_SECONDS",
        "VOICECODE_DEVICE",
        "VOICECODE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    # Don't pick up a developer's ~/.config or ./.env.
    monkeypatch.setattr(config, "_ENV_LOADED", True)
    return home


class RecordingNotifier:
    def __init__(self) -> None:
        self.infos: list[str] = []
        self.errors: list[str] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class FakeCompletion:
    """Scripted completion provider that records the requests it receives."""

    def __init__(
        self,
        *,
        chunks: Iterable[str] = (),
        body: str = "",
        error: Exception | None = None,
        fail_after: int | None = None,
    ) -> None:
        self.chunks = list(chunks)
        self.body = body
        self.error = error
        self.fail_after = fail_after
        self.requests: list[tuple[str, str, str]] = []

    def stream(self, system_prompt: str, user_content: str):
        self.requests.append(("stream", system_prompt, user_content))
        for i, chunk in enumerate(self.chunks):
            if self.fail_after is not None and i == self.fail_after:
                raise self.error or RuntimeError("stream broke")
            yield chunk
        if self.error is not None and self.fail_after is None:
            raise self.error

    def complete(self, system_prompt: str, user_content: str) -> str:
        self.requests.append(("complete", system_prompt, user_content))
        if self.error is not None:
            raise self.error
        return self.body


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def workspace_dir(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture()
def workspace(workspace_dir: Path) -> LocalWorkspace:
    return LocalWorkspace([workspace_dir])


@pytest.fixture()
def document(workspace_dir: Path) -> TextDocument:
    path = workspace_dir / "main.py"
    path.write_text("import os\n", encoding="utf-8")
    return TextDocument.load(path)
