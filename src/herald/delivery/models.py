"""Request and summary models for the delivery orchestrator."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from herald.core.types import NotificationCategory, NotificationPriority


class SubmitNotification(BaseModel):
    """A notification submitted by the surrounding application.

    Either ``title`` and ``message`` are given directly, or ``template_key``
    names a template rendered with ``variables``.
    """

    recipient_id: str = Field(min_length=1)
    title: str | None = None
    message: str | None = None
    category: NotificationCategory | None = None
    priority: NotificationPriority | None = None
    template_key: str | None = None
    variables: dict[str, Any] = Field(default_factory=dict)
    action_url: str | None = None
    action_label: str | None = None
    image_url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class DeliveryStats(BaseModel):
    """Delivery log counts per status for one recipient."""

    total: int = 0
    sent: int = 0
    delivered: int = 0
    failed: int = 0
    opened: int = 0
    clicked: int = 0
