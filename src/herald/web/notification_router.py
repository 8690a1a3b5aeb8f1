"""FastAPI router for notification submission, delivery logs and engagement."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

from herald.core.types import DeliveryStatus
from herald.delivery.models import DeliveryStats, SubmitNotification
from herald.notifications.models import DeliveryLog, Notification

router = APIRouter()


class SubmitResponse(BaseModel):
    id: str
    status: DeliveryStatus
    delivery_logs: list[DeliveryLog]


class ClickRequest(BaseModel):
    action_id: str | None = None


class DeliveryLogUpdate(BaseModel):
    status: DeliveryStatus
    error_message: str | None = None


@router.post("/api/notifications", status_code=201)
async def submit_notification(body: SubmitNotification, request: Request) -> SubmitResponse:
    """Create a notification and run it through the delivery gate."""
    orchestrator = request.app.state.delivery_orchestrator
    notification = await orchestrator.submit(body)
    logs = await orchestrator.get_delivery_logs(notification.id)
    return SubmitResponse(id=notification.id, status=logs[0].status, delivery_logs=logs)


@router.get("/api/notifications/{notification_id}")
async def get_notification(notification_id: str, request: Request) -> Notification:
    return await request.app.state.delivery_orchestrator.get_notification(notification_id)


@router.get("/api/notifications/{notification_id}/delivery-logs")
async def list_delivery_logs(notification_id: str, request: Request) -> list[DeliveryLog]:
    orchestrator = request.app.state.delivery_orchestrator
    await orchestrator.get_notification(notification_id)
    return await orchestrator.get_delivery_logs(notification_id)


@router.post("/api/notifications/{notification_id}/open", status_code=204)
async def track_open(notification_id: str, request: Request) -> None:
    await request.app.state.delivery_orchestrator.track_open(notification_id)


@router.post("/api/notifications/{notification_id}/click", status_code=204)
async def track_click(
    notification_id: str, request: Request, body: ClickRequest | None = None
) -> None:
    action_id = body.action_id if body else None
    await request.app.state.delivery_orchestrator.track_click(notification_id, action_id)


@router.patch("/api/delivery-logs/{log_id}")
async def update_delivery_log(
    log_id: str, body: DeliveryLogUpdate, request: Request
) -> DeliveryLog:
    """Advance a delivery log, e.g. when a channel confirms delivery."""
    return await request.app.state.delivery_orchestrator.update_delivery_log(
        log_id, body.status, body.error_message
    )


@router.get("/api/recipients/{recipient_id}/delivery-stats")
async def delivery_stats(recipient_id: str, request: Request) -> DeliveryStats:
    return await request.app.state.delivery_orchestrator.get_delivery_stats(recipient_id)
