"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from converter_app.database import get_db
from converter_app.logging_config import get_logger

logger = get_logger(__name__)

SERVICE_NAME = "conversion-store-api"

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Basic liveness check.

    Returns:
        Health status and timestamp
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": SERVICE_NAME,
    }


@router.get("/health/detailed")
async def detailed_health_check(db: Session = Depends(get_db)) -> dict[str, str | dict[str, str]]:
    """Detailed health check including database connectivity.

    Args:
        db: Database session

    Returns:
        Detailed health status
    """
    checks: dict[str, str] = {}
    status = "healthy"

    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except SQLAlchemyError as e:
        logger.warning("Database health check failed", error=str(e))
        status = "unhealthy"
        checks["database"] = f"unhealthy: {e!s}"

    return {
        "status": status,
        "timestamp": datetime.now(UTC).isoformat(),
        "service": SERVICE_NAME,
        "checks": checks,
    }
