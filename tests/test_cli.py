from __future__ import annotations

import json
import stat
from pathlib import Path

from click.testing import CliRunner

from voicecode.cli import main


def _last_json(output: str) -> dict:
    # Notices go to stderr; the JSON payload is always the final line.
    return json.loads(output.strip().splitlines()[-1])


def test_help_lists_commands() -> None:
    result = CliRunner().invoke(main, ["--help"])
    assert result.exit_code == 0, result.output
    for name in ("listen", "run", "transcribe-file", "classify", "context", "config"):
        assert name in result.output


def test_classify_prints_kind_and_argument() -> None:
    result = CliRunner().invoke(main, ["classify", "Create", "a", "file", "named", "App.js."])
    assert result.exit_code == 0, result.output
    assert result.output == "create_file\tapp.js\n"


def test_classify_json() -> None:
    result = CliRunner().invoke(main, ["classify", "--json", "go", "live", "now"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"kind": "go_live", "argument": "", "reason": "prefix:go live"}


def test_run_creates_file_in_workspace(isolated_home: Path, tmp_path: Path) -> None:
    project = tmp_path / "project"
    project.mkdir()

    result = CliRunner().invoke(
        main, ["run", "-w", str(project), "--json", "create", "a", "file", "named", "notes.txt"]
    )

    assert result.exit_code == 0, result.output
    assert (project / "notes.txt").read_text(encoding="utf-8") == ""
    payload = _last_json(result.output)
    assert payload["ok"] is True
    assert payload["intent"]["kind"] == "create_file"


def test_run_unrecognized_reports_notice(isolated_home: Path, tmp_path: Path) -> None:
    result = CliRunner().invoke(main, ["run", "-w", str(tmp_path), "make", "coffee"])
    assert result.exit_code == 0, result.output
    assert "Unrecognised command: make coffee" in result.output


def test_run_failure_exits_nonzero(isolated_home: Path, tmp_path: Path) -> None:
    result = CliRunner().invoke(main, ["run", "-w", str(tmp_path), "--json", "delete", "missing.txt"])
    assert result.exit_code == 1
    payload = _last_json(result.output)
    assert payload["ok"] is False
    assert payload["dispatch"]["stage"] == "error"
    assert "Error deleting file" in result.output


def test_run_generate_without_document_is_skipped(isolated_home: Path, tmp_path: Path) -> None:
    result = CliRunner().invoke(
        main, ["run", "-w", str(tmp_path), "--json", "generate", "a", "hello", "world"]
    )
    assert result.exit_code == 0, result.output
    assert _last_json(result.output)["stage"] == "skipped"


def test_context_prints_top_level_files(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("alpha", encoding="utf-8")
    (tmp_path / "sub").mkdir()

    result = CliRunner().invoke(main, ["context", "-w", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert result.output == '<file name="a.txt">\nalpha\n</file>\n'


def test_config_path(isolated_home: Path) -> None:
    result = CliRunner().invoke(main, ["config", "path"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == str(isolated_home / ".config" / "voicecode" / "voicecode.env")


def test_config_set_api_key_writes_private_env_file(isolated_home: Path) -> None:
    result = CliRunner().invoke(main, ["config", "set-api-key", "sk-test-123"])
    assert result.exit_code == 0, result.output

    env_path = isolated_home / ".config" / "voicecode" / "voicecode.env"
    assert "OPENAI_API_KEY=sk-test-123" in env_path.read_text(encoding="utf-8")
    assert stat.S_IMODE(env_path.stat().st_mode) == 0o600


def test_config_show_never_prints_secret(isolated_home: Path, monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-secret")
    monkeypatch.setenv("VOICECODE_COMPLETION_MODEL", "gpt-test")

    result = CliRunner().invoke(main, ["config", "show"])

    assert result.exit_code == 0, result.output
    assert "sk-secret" not in result.output
    assert "api_key: set" in result.output
    assert "completion_model: gpt-test" in result.output
