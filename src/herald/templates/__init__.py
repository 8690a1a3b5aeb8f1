"""Keyed, versioned notification templates."""

from herald.templates.models import (
    NotificationTemplate,
    RenderedTemplate,
    TemplateCreate,
    TemplateUpdate,
)
from herald.templates.renderer import TemplateRenderer, render_text
from herald.templates.store import TemplateStore

__all__ = [
    "NotificationTemplate",
    "RenderedTemplate",
    "TemplateCreate",
    "TemplateRenderer",
    "TemplateStore",
    "TemplateUpdate",
    "render_text",
]
