"""FastAPI application factory for the Herald notification engine."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from herald import __version__
from herald.analytics.aggregator import AnalyticsAggregator
from herald.core.config import Settings
from herald.delivery.orchestrator import DeliveryOrchestrator
from herald.notifications.store import DeliveryLogStore, NotificationStore
from herald.preferences.store import PreferenceStore
from herald.realtime.registry import ConnectionRegistry
from herald.templates.renderer import TemplateRenderer, load_template_file
from herald.templates.store import TemplateStore
from herald.web.analytics_router import router as analytics_router
from herald.web.errors import install_error_handlers
from herald.web.notification_router import router as notification_router
from herald.web.preference_router import router as preference_router
from herald.web.realtime_router import router as realtime_router
from herald.web.template_router import router as template_router

logger = logging.getLogger(__name__)


def _build_stores(settings: Settings) -> tuple[Any, dict[str, Any]]:
    """Return ``(db_manager, stores)`` for the configured persistence backend."""
    if not settings.db.database_url:
        return None, {
            "notifications": NotificationStore(),
            "delivery_logs": DeliveryLogStore(),
            "preferences": PreferenceStore(),
            "templates": TemplateStore(),
        }

    from herald.db.engine import DatabaseManager
    from herald.repositories.postgres.notifications import (
        PostgresDeliveryLogRepository,
        PostgresNotificationRepository,
    )
    from herald.repositories.postgres.preferences import PostgresPreferenceRepository
    from herald.repositories.postgres.templates import PostgresTemplateRepository

    db = DatabaseManager.from_config(settings.db)
    return db, {
        "notifications": PostgresNotificationRepository(db),
        "delivery_logs": PostgresDeliveryLogRepository(db),
        "preferences": PostgresPreferenceRepository(db),
        "templates": PostgresTemplateRepository(db),
    }


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    db = app.state.db_manager
    if db is not None and settings.db.database_url.startswith("sqlite"):
        await db.create_all()

    templates_path = Path(settings.notification.templates_path)
    if templates_path.is_file():
        await app.state.template_renderer.seed(load_template_file(templates_path))
    else:
        logger.warning("Template file %s not found, starting without seed templates", templates_path)

    try:
        yield
    finally:
        if db is not None:
            await db.close()


def create_app(
    settings: Settings | None = None,
    registry: ConnectionRegistry | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can create isolated app instances.

    Args:
        settings: Application settings. Defaults to Settings().
        registry: Optional pre-built connection registry.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()

    logging.getLogger("herald").setLevel(settings.log_level.upper())

    app = FastAPI(
        title="Herald",
        description="Notification delivery and engagement analytics engine",
        version=__version__,
        lifespan=_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    db_manager, stores = _build_stores(settings)
    if registry is None:
        registry = ConnectionRegistry(shard_count=settings.realtime.shard_count)

    template_renderer = TemplateRenderer(stores["templates"])
    delivery_orchestrator = DeliveryOrchestrator(
        notifications=stores["notifications"],
        delivery_logs=stores["delivery_logs"],
        preferences=stores["preferences"],
        registry=registry,
        templates=template_renderer,
    )
    analytics_aggregator = AnalyticsAggregator(
        notifications=stores["notifications"],
        delivery_logs=stores["delivery_logs"],
    )

    app.state.settings = settings
    app.state.db_manager = db_manager
    app.state.notification_store = stores["notifications"]
    app.state.delivery_log_store = stores["delivery_logs"]
    app.state.preference_store = stores["preferences"]
    app.state.template_store = stores["templates"]
    app.state.connection_registry = registry
    app.state.template_renderer = template_renderer
    app.state.delivery_orchestrator = delivery_orchestrator
    app.state.analytics_aggregator = analytics_aggregator

    app.include_router(notification_router)
    app.include_router(preference_router)
    app.include_router(template_router)
    app.include_router(analytics_router)
    app.include_router(realtime_router)

    @app.get("/api/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "version": __version__,
            "backend": "sql" if db_manager is not None else "memory",
            "connected_recipients": len(registry.connected_recipients()),
        }

    return app
