"""
Health check endpoint.
"""

from datetime import datetime, timezone
import os

from fastapi import APIRouter

from backtester import __version__
from backtester.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic health check for load balancers.

    Returns 200 if the service is running.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "backtester",
        "version": os.getenv("VERSION", __version__),
        "environment": get_settings().app_env,
    }
