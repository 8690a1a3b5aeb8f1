"""Live push sessions and the process-wide connection registry."""

from herald.realtime.registry import ConnectionRegistry, PushSession
from herald.realtime.session import SessionClosedError, WebSocketSession

__all__ = [
    "ConnectionRegistry",
    "PushSession",
    "SessionClosedError",
    "WebSocketSession",
]
