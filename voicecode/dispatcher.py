from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Literal

from voicecode.codegen import edit_code, generate_code
from voicecode.completion import CompletionClient, OpenAICompletionClient
from voicecode.config import VoicecodeConfig
from voicecode.editor import DocumentStore, NoActiveDocument, NoWorkspaceOpen, WorkspaceFileStore
from voicecode.intent_router import Intent, IntentKind
from voicecode.live_server import LiveServerLauncher
from voicecode.notify import Notifier


logger = logging.getLogger(__name__)


DispatchStage = Literal["complete", "skipped", "error", "unrecognized"]


@dataclass(frozen=True)
class DispatchResult:
    ok: bool
    stage: DispatchStage
    intent: Intent
    message: str = ""
    error: str | None = None
    timing: dict[str, int] | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "ok": bool(self.ok),
            "stage": self.stage,
            "intent": self.intent.to_dict(),
            "message": self.message,
            "error": self.error,
        }
        if self.timing is not None:
            payload["timing"] = self.timing
        return payload


_FAILURE_LABELS: dict[str, str] = {
    "create_file": "Error creating file",
    "delete_file": "Error deleting file",
    "open_file": "Error opening file",
    "generate_code": "Failed to generate code",
    "edit_code": "Failed to edit code",
    "go_live": "Failed to start live server",
}


class CommandDispatcher:
    """Execute one classified voice command against the editor capabilities.

    The dispatcher owns the active document: `open_file` replaces it, and
    `generate_code`/`edit_code` act on it. Every failure is reported through
    the notifier and returned as a result; nothing raises out of `dispatch`.
    """

    def __init__(
        self,
        workspace: WorkspaceFileStore,
        notifier: Notifier,
        *,
        document: DocumentStore | None = None,
        completion: CompletionClient | None = None,
        live_server: Callable[[], object] | None = None,
        config: VoicecodeConfig | None = None,
    ) -> None:
        self.workspace = workspace
        self.notifier = notifier
        self.document = document
        self.config = config or VoicecodeConfig()
        self._completion = completion
        self._live_server = live_server
        self.live_server_process: object | None = None
        self._handlers: dict[IntentKind, Callable[[Intent], str]] = {
            "create_file": self._create_file,
            "delete_file": self._delete_file,
            "open_file": self._open_file,
            "generate_code": self._generate_code,
            "edit_code": self._edit_code,
            "go_live": self._go_live,
            "unrecognized": self._unrecognized,
        }

    @property
    def completion(self) -> CompletionClient:
        if self._completion is None:
            self._completion = OpenAICompletionClient(self.config)
        return self._completion

    def _active_document(self) -> DocumentStore:
        if self.document is None:
            raise NoActiveDocument()
        return self.document

    def dispatch(self, intent: Intent) -> DispatchResult:
        handler = self._handlers[intent.kind]
        started = time.monotonic()
        try:
            message = handler(intent)
        except NoActiveDocument as e:
            logger.info("Skipping %s: %s", intent.kind, e)
            return DispatchResult(ok=True, stage="skipped", intent=intent, message=str(e))
        except Exception as e:
            label = _FAILURE_LABELS.get(intent.kind, "Command failed")
            logger.error("%s: %s", label, e)
            self.notifier.error(f"{label}: {e}")
            return DispatchResult(
                ok=False,
                stage="error",
                intent=intent,
                error=str(e),
                timing={"dispatch_ms": int((time.monotonic() - started) * 1000)},
            )

        stage = "unrecognized" if intent.kind == "unrecognized" else "complete"
        return DispatchResult(
            ok=True,
            stage=stage,
            intent=intent,
            message=message,
            timing={"dispatch_ms": int((time.monotonic() - started) * 1000)},
        )

    def _create_file(self, intent: Intent) -> str:
        path = self.workspace.write_file(intent.argument, "")
        message = f"Created file: {path}"
        self.notifier.info(message)
        return message

    def _delete_file(self, intent: Intent) -> str:
        path = self.workspace.delete_file(intent.argument)
        message = f"Deleted file: {path}"
        self.notifier.info(message)
        return message

    def _open_file(self, intent: Intent) -> str:
        self.document = self.workspace.open_and_focus(intent.argument)
        message = f"Opened file: {getattr(self.document, 'path', intent.argument)}"
        self.notifier.info(message)
        return message

    def _generate_code(self, intent: Intent) -> str:
        document = self._active_document()
        insertions = generate_code(
            intent.argument,
            workspace=self.workspace,
            document=document,
            completion=self.completion,
        )
        logger.debug("Generated code in %d insertions", insertions)
        self.notifier.info("Code inserted!")
        return "Code inserted!"

    def _edit_code(self, intent: Intent) -> str:
        document = self._active_document()
        edit_code(intent.argument, document=document, completion=self.completion)
        self.notifier.info("Code updated!")
        return "Code updated!"

    def _live_server_cwd(self) -> Path | None:
        # Serving needs no open folder; without one the server runs in the cwd.
        try:
            return getattr(self.workspace, "root", None)
        except NoWorkspaceOpen:
            return None

    def _go_live(self, intent: Intent) -> str:
        launch = self._live_server
        if launch is None:
            launch = LiveServerLauncher(
                self.config.live_server_command,
                cwd=self._live_server_cwd(),
            ).start
        self.live_server_process = launch()
        return "Live server starting"

    def _unrecognized(self, intent: Intent) -> str:
        message = f"Unrecognised command: {intent.argument}"
        logger.info(message)
        self.notifier.error(message)
        return message
