"""Zargon Inventory Web — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ZargonError to JSON (API) or redirects/pages (dashboard)
    - CORS configured from settings (not hardcoded)
    - One backend HTTP client per process, opened and closed by the lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Proxy routers first, then pages, so /api/* never reaches a page route
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from zargon_web.api.error_handlers import register_error_handlers
from zargon_web.api.pages import (
    admin,
    analytics as analytics_pages,
    auth_pages,
    backup as backup_pages,
    exports,
    home,
    notices as notice_pages,
    orders as order_pages,
    reports as report_pages,
    stock,
)
from zargon_web.api.routes import (
    analytics,
    auth,
    backup,
    courier,
    database,
    delivery,
    export,
    health,
    inventory,
    notices,
    orders,
    reports,
    users,
)
from zargon_web.config import get_settings
from zargon_web.infrastructure.backend_client import ResilientBackendClient
from zargon_web.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.backend_client = ResilientBackendClient.from_settings(settings)
    logger.info(
        "Zargon web started",
        extra={"backend_path": settings.api_base_url},
    )
    yield
    await app.state.backend_client.aclose()
    logger.info("Zargon web shutting down")


app = FastAPI(title="Zargon Inventory Web", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age_seconds,
    same_site="lax",
)

# Proxy routes
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(inventory.router)
app.include_router(orders.router)
app.include_router(reports.router)
app.include_router(notices.router)
app.include_router(backup.router)
app.include_router(database.router)
app.include_router(users.router)
app.include_router(analytics.router)
app.include_router(courier.router)
app.include_router(delivery.router)
app.include_router(export.router)

# Dashboard pages
app.include_router(auth_pages.router)
app.include_router(home.router)
app.include_router(stock.router)
app.include_router(exports.router)
app.include_router(order_pages.router)
app.include_router(report_pages.router)
app.include_router(notice_pages.router)
app.include_router(analytics_pages.router)
app.include_router(backup_pages.router)
app.include_router(admin.router)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

register_error_handlers(app)
