"""civicreports FastAPI application."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from civicreports.api import activities, admin, dashboard, exports, filters, health, reports, ws
from civicreports.core.config import settings
from civicreports.core.deps import get_event_bus
from civicreports.core.ws_manager import ws_manager

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    unsubscribe = ws_manager.bridge(get_event_bus(), asyncio.get_running_loop())
    logger.info("%s started (report backend: %s)", settings.app_name, settings.report_backend)
    yield
    unsubscribe()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(reports.router)
app.include_router(filters.router)
app.include_router(dashboard.router)
app.include_router(exports.router)
app.include_router(activities.router)
app.include_router(admin.router)
app.include_router(ws.router)
