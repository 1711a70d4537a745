"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and basic connectivity tests.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

from app.config.firebase import get_db
from app.core.settings import settings


router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check():
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/db")
def database_health():
    """
    Database connectivity check.
    Lists collections to verify the store answers.
    """
    try:
        db = get_db()
        collections = list(db.collections())
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Database connection failed: {type(e).__name__}")

    return {
        "status": "healthy",
        "database": "mock" if settings.USE_MOCK_DB else "firestore",
        "connected": True,
        "collections_count": len(collections),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
