from __future__ import annotations

import os
from pathlib import Path

from voicecode.context import (
    build_workspace_context,
    collect_workspace_files,
    render_workspace_context,
)
from voicecode.editor import LocalWorkspace


def test_build_workspace_context_without_workspace_is_empty() -> None:
    assert build_workspace_context(LocalWorkspace([])) == ""


def test_render_workspace_context_tags_each_file() -> None:
    blob = render_workspace_context([("a.py", "x = 1"), ("b.txt", "hi")])
    assert blob == '<file name="a.py">\nx = 1\n</file>\n<file name="b.txt">\nhi\n</file>\n'


def test_collect_workspace_files_skips_dirs_and_binary(workspace_dir: Path) -> None:
    (workspace_dir / "a.py").write_text("print('a')\n", encoding="utf-8")
    (workspace_dir / "sub").mkdir()
    (workspace_dir / "sub" / "deep.py").write_text("deep", encoding="utf-8")
    (workspace_dir / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe")

    files = collect_workspace_files(LocalWorkspace([workspace_dir]))
    assert files == [("a.py", "print('a')\n")]


def test_collect_workspace_files_follows_listing_order(workspace_dir: Path) -> None:
    for name in ("z.txt", "a.txt", "m.txt"):
        (workspace_dir / name).write_text(name, encoding="utf-8")

    files = collect_workspace_files(LocalWorkspace([workspace_dir]))
    with os.scandir(workspace_dir) as entries:
        expected = [entry.name for entry in entries]
    assert [name for name, _ in files] == expected


def test_build_workspace_context_uses_first_folder_only(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (first / "one.txt").write_text("1", encoding="utf-8")
    (second / "two.txt").write_text("2", encoding="utf-8")

    blob = build_workspace_context(LocalWorkspace([first, second]))
    assert blob == '<file name="one.txt">\n1\n</file>\n'


def test_build_workspace_context_is_rebuilt_each_call(workspace_dir: Path) -> None:
    workspace = LocalWorkspace([workspace_dir])
    assert build_workspace_context(workspace) == ""
    (workspace_dir / "new.txt").write_text("fresh", encoding="utf-8")
    assert "fresh" in build_workspace_context(workspace)
