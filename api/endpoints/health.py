"""
Meal Planner Health Check Endpoints
System health monitoring
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import time

from core.database import DatabaseHealthCheck
from core.config import settings

router = APIRouter()


@router.get("/")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.VERSION,
        "timestamp": time.time()
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe; checks the database"""
    if await DatabaseHealthCheck.check_connection():
        return {"status": "ready", "database": "connected", "timestamp": time.time()}

    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "database": "disconnected", "timestamp": time.time()}
    )
