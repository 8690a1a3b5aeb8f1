"""WebSocket endpoint for live notification push."""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from herald.realtime.session import WebSocketSession

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/notifications/{recipient_id}")
async def notifications_websocket(websocket: WebSocket, recipient_id: str) -> None:
    """Hold a push session open for ``recipient_id``.

    Outbound frames go through the session's queue; the receive loop only
    answers keep-alive pings.
    """
    registry = websocket.app.state.connection_registry
    queue_size = websocket.app.state.settings.realtime.send_queue_size

    await websocket.accept()
    session = WebSocketSession(websocket, max_queue=queue_size)
    session.start()
    registry.register(recipient_id, session)
    session.push({"type": "connected", "recipient_id": recipient_id})

    try:
        while True:
            try:
                data = await websocket.receive_json()
            except ValueError:
                logger.debug("Ignoring non-JSON frame from recipient %s", recipient_id)
                continue
            if isinstance(data, dict) and data.get("type") == "ping":
                session.push({"type": "pong"})
    except WebSocketDisconnect:
        logger.info("WebSocket disconnected for recipient %s", recipient_id)
    finally:
        registry.deregister(recipient_id, session)
        await session.aclose()
