"""Concurrency-safe registry of live push sessions, grouped by recipient.

The registry is long-lived, process-wide state. Recipients are spread over
a fixed number of shards, each guarded by its own lock, so connects,
disconnects and sends for unrelated recipients do not contend. No lock is
held while a session is pushed to.
"""

from __future__ import annotations

import logging
import threading
import zlib
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class PushSession(Protocol):
    """A live client connection able to accept payloads without blocking."""

    def push(self, payload: dict[str, Any]) -> None: ...


class _Shard:
    __slots__ = ("lock", "sessions")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.sessions: dict[str, set[PushSession]] = {}


class ConnectionRegistry:
    """Map of recipient id to the set of its currently connected sessions."""

    def __init__(self, shard_count: int = 16) -> None:
        if shard_count < 1:
            raise ValueError("shard_count must be at least 1")
        self._shards = [_Shard() for _ in range(shard_count)]

    def _shard_for(self, recipient_id: str) -> _Shard:
        # crc32 is stable across processes, unlike hash() on str.
        index = zlib.crc32(recipient_id.encode("utf-8")) % len(self._shards)
        return self._shards[index]

    def register(self, recipient_id: str, session: PushSession) -> None:
        shard = self._shard_for(recipient_id)
        with shard.lock:
            shard.sessions.setdefault(recipient_id, set()).add(session)
        logger.info("Registered push session for recipient %s", recipient_id)

    def deregister(self, recipient_id: str, session: PushSession) -> None:
        shard = self._shard_for(recipient_id)
        with shard.lock:
            sessions = shard.sessions.get(recipient_id)
            if sessions is None:
                return
            sessions.discard(session)
            if not sessions:
                del shard.sessions[recipient_id]
        logger.info("Deregistered push session for recipient %s", recipient_id)

    def is_connected(self, recipient_id: str) -> bool:
        shard = self._shard_for(recipient_id)
        with shard.lock:
            return bool(shard.sessions.get(recipient_id))

    def send_to_user(self, recipient_id: str, payload: dict[str, Any]) -> int:
        """Hand ``payload`` to every live session of ``recipient_id``.

        Returns how many sessions accepted it. A disconnected recipient is a
        no-op returning 0. Sessions that raise while being pushed to are
        dropped from the registry.
        """
        shard = self._shard_for(recipient_id)
        with shard.lock:
            targets = list(shard.sessions.get(recipient_id, ()))

        accepted = 0
        for session in targets:
            try:
                session.push(payload)
            except Exception as exc:
                logger.warning(
                    "Dropping push session for recipient %s after send failure: %s",
                    recipient_id,
                    exc,
                )
                self.deregister(recipient_id, session)
            else:
                accepted += 1
        return accepted

    def connection_count(self, recipient_id: str | None = None) -> int:
        if recipient_id is not None:
            shard = self._shard_for(recipient_id)
            with shard.lock:
                return len(shard.sessions.get(recipient_id, ()))
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += sum(len(s) for s in shard.sessions.values())
        return total

    def connected_recipients(self) -> list[str]:
        recipients: list[str] = []
        for shard in self._shards:
            with shard.lock:
                recipients.extend(shard.sessions)
        return sorted(recipients)
