"""Health check endpoints."""

from typing import Any, Dict

from fastapi import APIRouter

from whats_for_dinner.config import settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check() -> Dict[str, str]:
    """Liveness check."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness_check() -> Dict[str, Any]:
    """
    Readiness check.

    Reports whether a Gemini API key is configured; the service still starts
    without one, but every submission will fail.
    """
    return {
        "status": "ready",
        "dependencies": {
            "gemini": {
                "configured": bool(settings.gemini_api_key),
                "model": settings.gemini_model,
            },
        },
    }
