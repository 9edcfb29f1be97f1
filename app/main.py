"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.cache import close_cache_backend, get_cache_backend
from app.core.config import get_settings
from app.core.database import SessionLocal, close_engine
from app.core.metrics import build_metrics_response, instrument_http_request
from app.modules.bookings.router import router as bookings_router
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.router import router as identity_router
from app.modules.identity.service import IdentityService
from app.modules.mentors.router import router as mentors_router
from app.modules.sessions.router import router as sessions_router
from app.modules.slots.router import router as slots_router
from app.shared.exceptions import register_exception_handlers
from app.shared.utils import utc_now

settings = get_settings()
logger = logging.getLogger(__name__)

LANDING_LINKS = (
    ("/docs", "API docs"),
    ("/health", "Health"),
    ("/ready", "Ready"),
    ("/metrics", "Metrics"),
)


def _landing_page_html() -> str:
    links = "\n".join(f'        <li><a href="{href}">{label}</a></li>' for href, label in LANDING_LINKS)
    return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{settings.app_name} API</title>
  </head>
  <body style="font-family: sans-serif; max-width: 640px; margin: 48px auto;">
    <h1>{settings.app_name} API</h1>
    <p>Mentor profiles, open slots and session booking live under <code>{settings.api_prefix}</code>.</p>
    <ul>
{links}
    </ul>
  </body>
</html>
"""


def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Seed roles on startup; release DB and cache pools on shutdown."""
    _configure_logging()
    logger.info(
        "Starting %s (env=%s, gateway=%s, marker_store=%s)",
        settings.app_name,
        settings.app_env,
        settings.booking_gateway_backend,
        settings.pending_booking_backend,
    )

    async with SessionLocal() as session:
        try:
            await IdentityService(IdentityRepository(session)).ensure_default_roles()
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception("Failed to ensure default roles")
            raise

    yield

    logger.info("Shutting down %s", settings.app_name)
    await close_cache_backend()
    await close_engine()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)
app.middleware("http")(instrument_http_request)

register_exception_handlers(app)

for router in (identity_router, mentors_router, slots_router, bookings_router, sessions_router):
    app.include_router(router, prefix=settings.api_prefix)


@app.get("/", include_in_schema=False, response_class=HTMLResponse)
async def landing_page() -> HTMLResponse:
    return HTMLResponse(content=_landing_page_html())


@app.get("/health")
async def healthcheck() -> dict[str, str]:
    """Liveness probe endpoint."""
    return {"status": "ok"}


async def _is_database_ready() -> bool:
    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.exception("Database readiness check failed")
        return False
    return True


async def _is_marker_store_ready() -> bool:
    """Round-trip a short-lived probe key through the pending booking cache."""
    cache = get_cache_backend()
    probe_key = f"ready-probe:{uuid4().hex}"
    try:
        await cache.set(probe_key, "1", ttl_seconds=5)
        stored = await cache.get(probe_key)
        await cache.delete(probe_key)
    except (RedisError, OSError):
        logger.exception("Pending booking store readiness check failed")
        return False
    return stored == "1"


@app.get("/ready")
async def readiness_check() -> dict[str, str]:
    """Readiness probe: database and pending booking store must both respond."""
    database_ready = await _is_database_ready()
    marker_store_ready = await _is_marker_store_ready()
    if not (database_ready and marker_store_ready):
        failed = [
            name
            for name, ready in (("database", database_ready), ("marker_store", marker_store_ready))
            if not ready
        ]
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Not ready: {', '.join(failed)}",
        )
    return {
        "status": "ready",
        "database": "ok",
        "marker_store": "ok",
        "timestamp": utc_now().isoformat(),
    }


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint(_: Request) -> Response:
    """Prometheus metrics endpoint."""
    return build_metrics_response()
