"""FastAPI router for notification template management and test rendering."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from herald.core.types import NotificationCategory
from herald.templates.models import (
    NotificationTemplate,
    RenderedTemplate,
    TemplateCreate,
    TemplateUpdate,
)

router = APIRouter(prefix="/api/templates")


class RenderRequest(BaseModel):
    variables: dict[str, Any] = Field(default_factory=dict)


@router.post("", status_code=201)
async def create_template(body: TemplateCreate, request: Request) -> NotificationTemplate:
    return await request.app.state.template_renderer.create(body)


@router.get("")
async def list_templates(
    request: Request,
    category: NotificationCategory | None = None,
    active_only: bool = False,
) -> list[NotificationTemplate]:
    return await request.app.state.template_renderer.list_templates(category, active_only)


@router.get("/by-key/{key}")
async def get_template_by_key(key: str, request: Request) -> NotificationTemplate:
    return await request.app.state.template_renderer.find_by_key(key)


@router.get("/{template_id}")
async def get_template(template_id: str, request: Request) -> NotificationTemplate:
    return await request.app.state.template_renderer.get(template_id)


@router.patch("/{template_id}")
async def update_template(
    template_id: str, body: TemplateUpdate, request: Request
) -> NotificationTemplate:
    return await request.app.state.template_renderer.update(template_id, body)


@router.delete("/{template_id}", status_code=204)
async def delete_template(template_id: str, request: Request) -> None:
    await request.app.state.template_renderer.delete(template_id)


@router.post("/{key}/render")
async def render_template(key: str, body: RenderRequest, request: Request) -> RenderedTemplate:
    """Render a template without creating a notification."""
    return await request.app.state.template_renderer.render(key, body.variables)
