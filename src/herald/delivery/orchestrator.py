"""Delivery orchestration: decide, push, and record every attempt.

Each call to ``deliver`` ends in exactly one new delivery log. Preference
and DND lookups fail open so a transient read error never silently drops a
notification. Nothing here retries; re-invoking ``deliver`` is the
caller's policy.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from herald.core.errors import DeliveryError, NotFoundError, ValidationError
from herald.core.types import (
    DeliveryStatus,
    NotificationCategory,
    NotificationChannel,
    NotificationPriority,
)
from herald.delivery.models import DeliveryStats, SubmitNotification
from herald.notifications.models import DeliveryLog, Notification
from herald.preferences.dnd import is_in_dnd_window
from herald.preferences.models import Preference
from herald.realtime.registry import ConnectionRegistry
from herald.repositories import resolve
from herald.templates.renderer import TemplateRenderer

logger = logging.getLogger(__name__)

DISABLED_REASON = "Category disabled in recipient preferences"
DND_REASON = "Recipient in Do Not Disturb mode"


def _local_now() -> datetime:
    return datetime.now().astimezone()


class DeliveryOrchestrator:
    """Gatekeeper between notification submission and the delivery log."""

    def __init__(
        self,
        notifications: Any,
        delivery_logs: Any,
        preferences: Any,
        registry: ConnectionRegistry,
        templates: TemplateRenderer | None = None,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self._notifications = notifications
        self._logs = delivery_logs
        self._preferences = preferences
        self._registry = registry
        self._templates = templates
        self._clock = clock

    # -- Submission --

    async def submit(self, request: SubmitNotification) -> Notification:
        """Create a notification from ``request`` and deliver it."""
        title, message = request.title, request.message
        category, priority = request.category, request.priority

        if request.template_key:
            if self._templates is None:
                raise ValidationError("Template rendering is not configured", field="template_key")
            template = await self._templates.find_by_key(request.template_key)
            if not template.is_active:
                raise ValidationError(
                    f"Template {template.key!r} is inactive", field="template_key"
                )
            rendered = self._templates.render_template(template, request.variables)
            title, message = rendered.title, rendered.message
            category = category or template.category
            priority = priority or template.default_priority

        if title is None or message is None:
            raise ValidationError(
                "title and message are required when no template_key is given",
                field="title" if title is None else "message",
            )
        if category is None:
            raise ValidationError("category is required", field="category")

        notification = Notification(
            recipient_id=request.recipient_id,
            title=title,
            message=message,
            category=category,
            priority=priority or NotificationPriority.NORMAL,
            action_url=request.action_url,
            action_label=request.action_label,
            image_url=request.image_url,
            metadata=request.metadata,
            template_key=request.template_key,
        )
        await resolve(self._notifications.save(notification))
        await self.deliver(notification)
        return notification

    # -- Delivery --

    async def deliver(self, notification: Notification) -> DeliveryLog:
        """Run the delivery gate for ``notification`` and return the log it wrote."""
        logger.info(
            "Delivering notification %s to recipient %s",
            notification.id,
            notification.recipient_id,
        )
        try:
            preference = await self.check_preferences(
                notification.recipient_id, notification.category
            )
            if not preference.enabled:
                logger.info(
                    "Category %s disabled for recipient %s",
                    notification.category,
                    notification.recipient_id,
                )
                return await self.create_delivery_log(
                    notification.id,
                    NotificationChannel.IN_APP,
                    DeliveryStatus.FAILED,
                    DISABLED_REASON,
                )

            in_dnd = self.check_dnd(preference)
            if in_dnd and notification.priority != NotificationPriority.URGENT:
                logger.info(
                    "Recipient %s in DND, skipping %s notification %s",
                    notification.recipient_id,
                    notification.priority,
                    notification.id,
                )
                return await self.create_delivery_log(
                    notification.id,
                    NotificationChannel.IN_APP,
                    DeliveryStatus.FAILED,
                    DND_REASON,
                )

            return await self.deliver_in_app(notification)
        except Exception as exc:
            logger.exception("Failed to deliver notification %s", notification.id)
            try:
                await self.create_delivery_log(
                    notification.id,
                    NotificationChannel.IN_APP,
                    DeliveryStatus.FAILED,
                    str(exc) or type(exc).__name__,
                )
            except Exception:
                logger.exception(
                    "Could not record failure for notification %s", notification.id
                )
            raise DeliveryError(notification.id, str(exc) or type(exc).__name__) from exc

    async def deliver_in_app(self, notification: Notification) -> DeliveryLog:
        """Record a SENT log, then push to any live sessions of the recipient."""
        log = await self.create_delivery_log(
            notification.id, NotificationChannel.IN_APP, DeliveryStatus.SENT
        )

        payload = {"type": "notification", "data": notification.model_dump(mode="json")}
        try:
            pushed = self._registry.send_to_user(notification.recipient_id, payload)
        except Exception as exc:
            # The SENT log stands; the pull path still surfaces the notification.
            logger.warning("Live push for notification %s failed: %s", notification.id, exc)
            pushed = 0

        if pushed:
            logger.info(
                "Pushed notification %s to %d session(s) of recipient %s",
                notification.id,
                pushed,
                notification.recipient_id,
            )
        else:
            logger.info(
                "Recipient %s not connected, notification %s stored for later retrieval",
                notification.recipient_id,
                notification.id,
            )
        return log

    async def check_preferences(
        self, recipient_id: str, category: NotificationCategory
    ) -> Preference:
        """Return the recipient's preference, defaulting to enabled on lookup errors."""
        try:
            return await resolve(self._preferences.get(recipient_id, category))
        except Exception as exc:
            logger.warning(
                "Failed to check preferences for recipient %s, category %s: %s",
                recipient_id,
                category,
                exc,
            )
            return Preference.default(recipient_id, category)

    def check_dnd(self, preference: Preference) -> bool:
        """Return whether the recipient is in DND now, defaulting to False on errors."""
        try:
            return is_in_dnd_window(preference, self._clock())
        except Exception as exc:
            logger.warning(
                "Failed to check DND status for recipient %s: %s",
                preference.recipient_id,
                exc,
            )
            return False

    # -- Delivery log --

    async def create_delivery_log(
        self,
        notification_id: str,
        channel: NotificationChannel,
        status: DeliveryStatus,
        error_message: str | None = None,
    ) -> DeliveryLog:
        log = DeliveryLog.start(notification_id, channel, status, error_message)
        await resolve(self._logs.save(log))
        logger.info(
            "Created delivery log %s for notification %s with status %s",
            log.id,
            notification_id,
            status,
        )
        return log

    async def update_delivery_log(
        self,
        log_id: str,
        status: DeliveryStatus,
        error_message: str | None = None,
    ) -> DeliveryLog:
        log = await resolve(self._logs.get(log_id))
        if log is None:
            raise NotFoundError(f"Delivery log {log_id!r} not found")
        log.transition_to(status, error_message)
        await resolve(self._logs.save(log))
        logger.info("Updated delivery log %s to status %s", log_id, status)
        return log

    async def get_delivery_logs(self, notification_id: str) -> list[DeliveryLog]:
        return await resolve(self._logs.list_for_notification(notification_id))

    async def get_notification(self, notification_id: str) -> Notification:
        notification = await resolve(self._notifications.get(notification_id))
        if notification is None:
            raise NotFoundError(f"Notification {notification_id!r} not found")
        return notification

    async def get_delivery_stats(self, recipient_id: str) -> DeliveryStats:
        notifications = await resolve(self._notifications.list_for_recipient(recipient_id))
        logs = await resolve(
            self._logs.list_for_notifications([n.id for n in notifications])
        )
        stats = DeliveryStats(total=len(notifications))
        for log in logs:
            field = log.status.value.lower()
            setattr(stats, field, getattr(stats, field) + 1)
        return stats

    # -- Engagement --

    async def track_open(self, notification_id: str) -> Notification:
        """Mark the notification read and move its live logs to OPENED."""
        notification = await self._mark_read(notification_id)
        advanced = await self._advance_logs(notification_id, DeliveryStatus.OPENED)
        logger.info("Tracked open: notification=%s logs=%d", notification_id, advanced)
        return notification

    async def track_click(
        self, notification_id: str, action_id: str | None = None
    ) -> Notification:
        """Record a click; a click implies the notification was opened."""
        notification = await self._mark_read(notification_id)
        advanced = await self._advance_logs(notification_id, DeliveryStatus.CLICKED)
        logger.info(
            "Tracked click: notification=%s action=%s logs=%d",
            notification_id,
            action_id or "none",
            advanced,
        )
        return notification

    async def _mark_read(self, notification_id: str) -> Notification:
        notification = await self.get_notification(notification_id)
        if notification.mark_read():
            await resolve(self._notifications.save(notification))
        return notification

    async def _advance_logs(self, notification_id: str, target: DeliveryStatus) -> int:
        advanced = 0
        for log in await self.get_delivery_logs(notification_id):
            if log.advance_to(target):
                await resolve(self._logs.save(log))
                advanced += 1
        return advanced
