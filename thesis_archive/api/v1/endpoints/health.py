"""Liveness/readiness probe"""
import time
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from thesis_archive.core.config import settings
from thesis_archive.core.database import get_session_local
from thesis_archive.core.logging_config import logger

router = APIRouter()


async def check_database() -> Dict[str, Any]:
    start = time.time()
    try:
        async with get_session_local()() as session:
            await session.execute(text("SELECT 1"))
        return {"status": "healthy", "latency_ms": round((time.time() - start) * 1000, 2)}
    except Exception as e:
        logger.error(f"[Health] Database check failed: {e}")
        return {"status": "unhealthy", "error": type(e).__name__}


@router.get("/health")
async def health_check():
    database = await check_database()
    healthy = database["status"] == "healthy"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "service": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
            "checks": {"database": database},
        },
    )
