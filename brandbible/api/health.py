"""Health check endpoint."""

from fastapi import APIRouter
from datetime import datetime, timezone

from .. import __version__

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/")
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": _now(),
        "service": "brand-bible",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness check."""
    return {
        "ready": True,
        "timestamp": _now(),
    }
