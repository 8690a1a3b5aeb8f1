"""Notification template data models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from herald.core.types import NotificationCategory, NotificationChannel, NotificationPriority


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationTemplate(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    key: str
    name: str
    description: str | None = None
    category: NotificationCategory
    title: str
    message: str
    variables: list[str] = Field(default_factory=list)
    default_channels: list[NotificationChannel] = Field(
        default_factory=lambda: [NotificationChannel.IN_APP]
    )
    default_priority: NotificationPriority = NotificationPriority.NORMAL
    version: int = 1
    is_active: bool = True
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class TemplateCreate(BaseModel):
    key: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str | None = None
    category: NotificationCategory
    title: str
    message: str
    variables: list[str] = Field(default_factory=list)
    default_channels: list[NotificationChannel] = Field(
        default_factory=lambda: [NotificationChannel.IN_APP]
    )
    default_priority: NotificationPriority = NotificationPriority.NORMAL
    is_active: bool = True


class TemplateUpdate(BaseModel):
    """Partial template update. The key is immutable and cannot be changed."""

    name: str | None = None
    description: str | None = None
    category: NotificationCategory | None = None
    title: str | None = None
    message: str | None = None
    variables: list[str] | None = None
    default_channels: list[NotificationChannel] | None = None
    default_priority: NotificationPriority | None = None
    is_active: bool | None = None


class RenderedTemplate(BaseModel):
    title: str
    message: str
