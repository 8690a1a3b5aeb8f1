"""FastAPI router for recipient notification preferences."""

from __future__ import annotations

from fastapi import APIRouter, Request

from herald.core.types import NotificationCategory
from herald.preferences.models import DNDSettings, Preference, PreferenceUpdate
from herald.repositories import resolve

router = APIRouter(prefix="/api/recipients/{recipient_id}/preferences")


@router.get("")
async def list_preferences(recipient_id: str, request: Request) -> list[Preference]:
    """One preference per category; categories never written come back as defaults."""
    store = request.app.state.preference_store
    return await resolve(store.list_for_recipient(recipient_id))


@router.put("/dnd")
async def set_dnd(recipient_id: str, body: DNDSettings, request: Request) -> list[Preference]:
    store = request.app.state.preference_store
    return await resolve(store.set_dnd(recipient_id, body))


@router.post("/reset")
async def reset_preferences(recipient_id: str, request: Request) -> list[Preference]:
    store = request.app.state.preference_store
    return await resolve(store.reset_all(recipient_id))


@router.put("/{category}")
async def update_preference(
    recipient_id: str,
    category: NotificationCategory,
    body: PreferenceUpdate,
    request: Request,
) -> Preference:
    store = request.app.state.preference_store
    return await resolve(store.upsert(recipient_id, category, body))
