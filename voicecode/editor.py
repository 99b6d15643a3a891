"""Editor capabilities the command core calls across.

The core never touches an editor directly. It sees a `DocumentStore` (the
active document) and a `WorkspaceFileStore` (the open workspace folders). The
implementations here are backed by the local file system; tests swap in
their own.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence


logger = logging.getLogger(__name__)


class EditorError(RuntimeError):
    pass


class NoWorkspaceOpen(EditorError):
    def __init__(self, message: str = "Open a folder first") -> None:
        super().__init__(message)


class WorkspaceFileNotFound(EditorError):
    pass


class WorkspacePathError(EditorError):
    pass


class NoActiveDocument(EditorError):
    def __init__(self, message: str = "No active document") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class DocumentRange:
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid document range: {self.start}..{self.end}")


class DocumentStore(Protocol):
    def get_text(self) -> str: ...

    def text_length(self) -> int: ...

    def insert_at_cursor(self, text: str) -> None: ...

    def replace_range(self, span: DocumentRange, text: str) -> None: ...

    def save(self) -> None: ...


class WorkspaceFileStore(Protocol):
    def list_top_level_entries(self) -> list[str]: ...

    def read_file(self, name: str) -> str: ...

    def write_file(self, name: str, content: str) -> Path: ...

    def delete_file(self, name: str) -> Path: ...

    def open_and_focus(self, name: str) -> DocumentStore: ...


def full_range(document: DocumentStore) -> DocumentRange:
    """Span the whole document as it is right now."""
    return DocumentRange(0, document.text_length())


class TextDocument:
    """An in-memory text buffer with a cursor, saved back to `path`."""

    def __init__(self, path: Path, text: str = "", *, cursor: int | None = None) -> None:
        self.path = Path(path)
        self._text = text
        self.cursor = len(text) if cursor is None else max(0, min(int(cursor), len(text)))

    @classmethod
    def load(cls, path: Path, *, cursor: int | None = None) -> "TextDocument":
        path = Path(path)
        text = path.read_text(encoding="utf-8") if path.exists() else ""
        return cls(path, text, cursor=cursor)

    def get_text(self) -> str:
        return self._text

    def text_length(self) -> int:
        return len(self._text)

    def insert_at_cursor(self, text: str) -> None:
        self._text = self._text[: self.cursor] + text + self._text[self.cursor :]
        self.cursor += len(text)

    def replace_range(self, span: DocumentRange, text: str) -> None:
        if span.end > len(self._text):
            raise EditorError(
                f"range {span.start}..{span.end} is past the end of the document ({len(self._text)})"
            )
        self._text = self._text[: span.start] + text + self._text[span.end :]
        self.cursor = span.start + len(text)

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(self._text, encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.debug("Saved %s (%d chars)", self.path, len(self._text))


class LocalWorkspace:
    """Workspace folders on the local file system; only the first is used."""

    def __init__(self, folders: Sequence[Path] = ()) -> None:
        self.folders = [Path(folder) for folder in folders]

    @property
    def root(self) -> Path:
        if not self.folders:
            raise NoWorkspaceOpen()
        return self.folders[0]

    def resolve(self, name: str) -> Path:
        cleaned = (name or "").strip()
        if not cleaned:
            raise WorkspacePathError("No file name given")
        base = self.root.resolve(strict=False)
        resolved = (base / cleaned).resolve(strict=False)
        if not resolved.is_relative_to(base):
            raise WorkspacePathError(f"Path must be inside the workspace: {base}")
        return resolved

    def list_top_level_entries(self) -> list[str]:
        with os.scandir(self.root) as entries:
            return [entry.name for entry in entries]

    def read_file(self, name: str) -> str:
        return self.resolve(name).read_text(encoding="utf-8")

    def write_file(self, name: str, content: str) -> Path:
        path = self.resolve(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def delete_file(self, name: str) -> Path:
        path = self.resolve(name)
        if not path.exists():
            raise WorkspaceFileNotFound(f"File not found: {path}")
        if path.is_dir():
            raise WorkspacePathError(f"Refusing to delete a directory: {path}")
        path.unlink()
        return path

    def open_and_focus(self, name: str) -> TextDocument:
        path = self.resolve(name)
        if not path.is_file():
            raise WorkspaceFileNotFound(f"File not found: {path}")
        return TextDocument.load(path)
