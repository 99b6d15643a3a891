from __future__ import annotations

import dataclasses
import importlib
from pathlib import Path

import pytest


def _reload_config():
    import voicecode.config as config

    return importlib.reload(config)


def test_config_home_prefers_xdg_config_home(tmp_path: Path, monkeypatch) -> None:
    config = _reload_config()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert config.config_home() == tmp_path
    assert config.env_file_path() == tmp_path / "voicecode" / "voicecode.env"


def test_load_config_defaults(isolated_home) -> None:
    config = _reload_config()
    cfg = config.load_config(load_env=False)
    assert cfg.api_key is None
    assert cfg.completion_model == "gpt-4o-mini"
    assert cfg.transcribe_model == "whisper-1"
    assert cfg.silence_seconds == 3.0
    assert cfg.device_index is None


def test_load_config_reads_env(isolated_home, monkeypatch) -> None:
    config = _reload_config()
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("VOICECODE_COMPLETION_MODEL", "gpt-test")
    monkeypatch.setenv("VOICECODE_BASE_URL", "http://localhost:8080/v1")
    monkeypatch.setenv("VOICECODE_SILENCE_SECONDS", "1.5")
    monkeypatch.setenv("VOICECODE_MAX_RECORD_SECONDS", "nonsense")
    monkeypatch.setenv("VOICECODE_DEVICE", "3")

    cfg = config.load_config(load_env=False)
    assert cfg.api_key == "sk-env"
    assert cfg.completion_model == "gpt-test"
    assert cfg.base_url == "http://localhost:8080/v1"
    assert cfg.silence_seconds == 1.5
    assert cfg.max_record_seconds == config.DEFAULT_MAX_RECORD_SECONDS
    assert cfg.device_index == 3


def test_config_is_immutable(isolated_home) -> None:
    config = _reload_config()
    cfg = config.load_config(load_env=False)
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.completion_model = "other"  # type: ignore[misc]


def test_api_key_from_credentials_directory(isolated_home, tmp_path: Path, monkeypatch) -> None:
    config = _reload_config()
    cred_dir = tmp_path / "creds"
    cred_dir.mkdir()
    (cred_dir / "openai_api_key").write_text("sk-cred\n", encoding="utf-8")
    monkeypatch.setenv("CREDENTIALS_DIRECTORY", str(cred_dir))
    assert config.get_openai_api_key(load_env=False) == "sk-cred"


def test_require_api_key_raises_helpful_error(isolated_home) -> None:
    config = _reload_config()
    with pytest.raises(config.VoicecodeConfigError) as exc:
        config.VoicecodeConfig().require_api_key()
    assert "voicecode.env" in str(exc.value)


def test_load_environment_reads_env_file(isolated_home, tmp_path: Path, monkeypatch) -> None:
    config = _reload_config()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.chdir(tmp_path)
    env_path = config.env_file_path()
    env_path.parent.mkdir(parents=True)
    env_path.write_text("VOICECODE_TRANSCRIBE_MODEL=gpt-4o-transcribe\n", encoding="utf-8")
    # set-then-delete so monkeypatch removes what load_dotenv writes
    monkeypatch.setenv("VOICECODE_TRANSCRIBE_MODEL", "unset")
    monkeypatch.delenv("VOICECODE_TRANSCRIBE_MODEL")

    assert config.get_transcribe_model() == "gpt-4o-transcribe"


def test_upsert_env_var_writes_and_replaces(isolated_home, tmp_path: Path, monkeypatch) -> None:
    config = _reload_config()
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live")
    monkeypatch.setenv("VOICECODE_DEVICE", "0")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    env_path = config.env_file_path()
    env_path.parent.mkdir(parents=True)
    env_path.write_text("# comment\nexport OPENAI_API_KEY=old\nOTHER=1", encoding="utf-8")

    out = config.upsert_env_var("OPENAI_API_KEY", "sk-new")
    assert out == env_path
    assert env_path.read_text(encoding="utf-8") == "# comment\nOPENAI_API_KEY=sk-new\nOTHER=1"

    config.upsert_env_var("VOICECODE_DEVICE", "2")
    assert env_path.read_text(encoding="utf-8").endswith("OTHER=1\nVOICECODE_DEVICE=2\n")
    assert config.env_file_permissions_ok(env_path) is True


def test_upsert_env_var_rejects_multiline(isolated_home) -> None:
    config = _reload_config()
    with pytest.raises(ValueError):
        config.upsert_env_var("OPENAI_API_KEY", "a\nb")
