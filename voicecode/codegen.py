"""Model-backed document edits: streamed generation and whole-file rewrites."""

from __future__ import annotations

import logging

from voicecode.completion import CompletionClient
from voicecode.context import build_workspace_context
from voicecode.editor import DocumentStore, WorkspaceFileStore, full_range
from voicecode.prompts import (
    CODE_GENERATION_SYSTEM_PROMPT,
    build_edit_message,
    build_generation_message,
)
from voicecode.streaming import insert_stream, pump_chunks


logger = logging.getLogger(__name__)


def generate_code(
    prompt: str,
    *,
    workspace: WorkspaceFileStore,
    document: DocumentStore,
    completion: CompletionClient,
    system_prompt: str = CODE_GENERATION_SYSTEM_PROMPT,
) -> int:
    """Stream generated code into `document` at its cursor, then save it.

    Returns the number of insertions made.
    """
    context = build_workspace_context(workspace)
    user_content = build_generation_message(context, prompt)
    logger.debug("Generation request: %d context chars", len(context))

    insertions = insert_stream(document, pump_chunks(completion.stream(system_prompt, user_content)))
    document.save()
    return insertions


def edit_code(
    prompt: str,
    *,
    document: DocumentStore,
    completion: CompletionClient,
    system_prompt: str = CODE_GENERATION_SYSTEM_PROMPT,
) -> str:
    """Replace the whole document with the model's rewrite of it, then save."""
    user_content = build_edit_message(document.get_text(), prompt)
    body = completion.complete(system_prompt, user_content)
    logger.debug("Edit response: %d chars", len(body))

    # Length may have changed while the request was in flight.
    document.replace_range(full_range(document), body)
    document.save()
    return body
