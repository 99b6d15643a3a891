"""Serialize the open workspace into a context blob for the model."""

from __future__ import annotations

import logging

from voicecode.editor import EditorError, NoWorkspaceOpen, WorkspaceFileStore


logger = logging.getLogger(__name__)


def collect_workspace_files(workspace: WorkspaceFileStore) -> list[tuple[str, str]]:
    """Return (name, content) for each readable top-level entry, in listing order.

    Subdirectories are not descended into. Entries that cannot be read as text
    are logged and skipped.
    """
    try:
        names = workspace.list_top_level_entries()
    except NoWorkspaceOpen:
        return []

    files: list[tuple[str, str]] = []
    for name in names:
        try:
            files.append((name, workspace.read_file(name)))
        except (OSError, UnicodeDecodeError, EditorError) as e:
            logger.info("Skipping %s in workspace context: %s", name, e)
    return files


def render_workspace_context(files: list[tuple[str, str]]) -> str:
    return "".join(f'<file name="{name}">\n{content}\n</file>\n' for name, content in files)


def build_workspace_context(workspace: WorkspaceFileStore) -> str:
    return render_workspace_context(collect_workspace_files(workspace))
