"""Health check endpoint."""

from fastapi import APIRouter

from civicreports.core.config import settings
from civicreports.core.ws_manager import ws_manager

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict:
    """Return API health status and which report backend is active."""
    return {
        "status": "ok",
        "report_backend": settings.report_backend,
        "live_clients": ws_manager.total_connections,
    }
