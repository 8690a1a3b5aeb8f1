"""WebSocket-backed push session with a bounded outbound queue."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)


class SessionClosedError(RuntimeError):
    """Raised when pushing to a session whose writer has stopped."""


class WebSocketSession:
    """Adapts a FastAPI WebSocket to the non-blocking ``push`` contract.

    ``push`` only enqueues; a writer task started with ``start`` drains the
    queue onto the socket. A full queue drops the newest frame rather than
    blocking the sender.
    """

    def __init__(self, websocket: WebSocket, max_queue: int = 100) -> None:
        self._websocket = websocket
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=max_queue)
        self._loop = asyncio.get_running_loop()
        self._loop_thread = threading.get_ident()
        self._writer: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, payload: dict[str, Any]) -> None:
        if self._closed:
            raise SessionClosedError("push session is closed")
        if threading.get_ident() == self._loop_thread:
            self._enqueue(payload)
        else:
            self._loop.call_soon_threadsafe(self._enqueue, payload)

    def _enqueue(self, payload: dict[str, Any]) -> None:
        try:
            self._queue.put_nowait(payload)
        except asyncio.QueueFull:
            logger.warning("Push queue full, dropping frame of type %s", payload.get("type"))

    def start(self) -> asyncio.Task[None]:
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain())
        return self._writer

    async def _drain(self) -> None:
        try:
            while True:
                payload = await self._queue.get()
                await self._websocket.send_json(payload)
        except (WebSocketDisconnect, RuntimeError) as exc:
            logger.info("Push writer stopped: %s", exc)
        finally:
            self._closed = True

    async def aclose(self) -> None:
        self._closed = True
        writer = self._writer
        if writer is None:
            return
        if not writer.done():
            writer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await writer
        elif not writer.cancelled() and writer.exception() is not None:
            logger.warning("Push writer failed: %r", writer.exception())
