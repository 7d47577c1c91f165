"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request
from fastapi.responses import HTMLResponse

from restaurant_tracker.api.restaurants import router as restaurants_router
from restaurant_tracker.api.ui import Layout, render_ui
from restaurant_tracker.app_logging import configure_logging
from restaurant_tracker.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await app.state.container.open_resources()
        logger.info("Restaurant tracker started")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(restaurants_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/sync-status")
    async def sync_status(request: Request) -> dict[str, str]:
        """Return the advisory realtime subscription status."""
        state_container: AppContainer = request.app.state.container
        return {"status": state_container.realtime_sync.status.value}

    @app.get("/notifications")
    async def notifications(request: Request) -> dict[str, object]:
        """Return notifications that have not been dismissed yet."""
        state_container: AppContainer = request.app.state.container
        return {
            "notifications": [
                {
                    "message": entry.message,
                    "level": entry.level.value,
                    "expires_at": entry.expires_at.isoformat(),
                }
                for entry in state_container.notifier.active()
            ]
        }

    @app.get("/config")
    async def catalog(request: Request) -> dict[str, object]:
        """Return the choices offered by the editing form."""
        state_container: AppContainer = request.app.state.container
        choices = state_container.catalog
        return {
            "neighborhoods": list(choices.neighborhoods),
            "cuisines": list(choices.cuisines),
            "rating_categories": list(choices.rating_categories),
            "center": {"lat": choices.default_lat, "lng": choices.default_lng},
        }

    @app.get("/ui", response_class=HTMLResponse)
    async def ui(layout: Layout = Query(default=Layout.MAP)) -> HTMLResponse:
        """Single-page UI consuming the restaurant API."""
        return HTMLResponse(render_ui(layout))

    return app
