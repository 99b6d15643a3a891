"""Flush a token-incremental model stream into a document line by line.

A producer thread drains the provider stream into a `ChunkChannel`; the
consumer feeds each chunk to a `LineFlushBuffer` and inserts whatever it
releases at the document cursor. An empty chunk marks the end of the stream.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Iterable, Iterator

from voicecode.editor import DocumentStore


logger = logging.getLogger(__name__)

END_OF_STREAM = ""

# Chunks read ahead of the consumer; kept small so an aborted insert stops the read.
_STREAM_BACKLOG = 1
_PUT_POLL_SECONDS = 0.05
_JOIN_TIMEOUT_SECONDS = 1.0


class LineFlushBuffer:
    """Pending streamed text, released at newline boundaries or end of stream."""

    def __init__(self) -> None:
        self._pending = ""
        self.closed = False

    @property
    def pending(self) -> str:
        return self._pending

    def feed(self, chunk: str) -> str | None:
        """Append `chunk`; return the text to insert now, if any."""
        if self.closed:
            raise RuntimeError("stream already ended")
        self._pending += chunk
        if chunk == END_OF_STREAM:
            self.closed = True
            return self.flush()
        if self._pending.endswith("\n"):
            return self.flush()
        return None

    def flush(self) -> str | None:
        text, self._pending = self._pending, ""
        return text or None

    def discard(self) -> int:
        dropped = len(self._pending)
        self._pending = ""
        return dropped


class ChunkChannel:
    """Single-producer, single-consumer hand-off of stream chunks.

    With a `maxsize`, the producer blocks until the consumer catches up, and
    gives up as soon as the consumer calls `stop()`.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: queue.Queue[str | BaseException] = queue.Queue(maxsize=maxsize)
        self.stopped = threading.Event()

    def _offer(self, item: str | BaseException) -> bool:
        while not self.stopped.is_set():
            try:
                self._queue.put(item, timeout=_PUT_POLL_SECONDS)
            except queue.Full:
                continue
            return True
        return False

    def put(self, chunk: str) -> bool:
        """Queue a non-empty chunk; False once the consumer has stopped."""
        if not chunk:
            return not self.stopped.is_set()
        return self._offer(chunk)

    def close(self) -> None:
        self._offer(END_OF_STREAM)

    def fail(self, error: BaseException) -> None:
        self._offer(error)

    def stop(self) -> None:
        self.stopped.set()

    def __iter__(self) -> Iterator[str]:
        while True:
            item = self._queue.get()
            if isinstance(item, BaseException):
                raise item
            yield item
            if item == END_OF_STREAM:
                return


def _close_source(source: object) -> None:
    close = getattr(source, "close", None)
    if close is not None:
        close()


def pump_chunks(source: Iterable[str]) -> Iterator[str]:
    """Read `source` on a worker thread and yield its chunks, ending with "".

    Empty chunks from the provider are dropped so that the single trailing ""
    is the only end-of-stream marker. Errors raised by `source` are re-raised
    in the consuming thread. Closing this generator early stops the worker,
    which stops reading and closes `source`.
    """
    channel = ChunkChannel(maxsize=_STREAM_BACKLOG)

    def _produce() -> None:
        try:
            for chunk in source:
                if not channel.put(chunk or ""):
                    return
        except BaseException as e:
            # Handed to the consumer, which re-raises it.
            channel.fail(e)
        else:
            channel.close()
        finally:
            _close_source(source)

    thread = threading.Thread(target=_produce, name="voicecode-stream", daemon=True)
    thread.start()
    try:
        yield from channel
    finally:
        channel.stop()
        thread.join(timeout=_JOIN_TIMEOUT_SECONDS)
        if thread.is_alive():
            logger.debug("Stream reader still blocked on the provider; leaving it detached")


def insert_stream(document: DocumentStore, chunks: Iterable[str]) -> int:
    """Insert streamed text into `document` and return the number of insertions.

    Each insertion lands at the current cursor and completes before the next
    chunk is read. If the stream fails, text still pending in the buffer is
    dropped; earlier insertions stay in the document. `chunks` is closed on
    return, so an aborted insertion also ends the stream behind it.
    """
    buffer = LineFlushBuffer()
    insertions = 0
    stream = iter(chunks)
    try:
        for chunk in stream:
            text = buffer.feed(chunk or END_OF_STREAM)
            if text:
                document.insert_at_cursor(text)
                insertions += 1
            if buffer.closed:
                return insertions
    except Exception:
        dropped = buffer.discard()
        if dropped:
            logger.debug("Discarding %d unflushed characters", dropped)
        raise
    finally:
        _close_source(stream)

    text = buffer.flush()
    if text:
        document.insert_at_cursor(text)
        insertions += 1
    return insertions
