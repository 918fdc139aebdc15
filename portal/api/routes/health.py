"""Health check endpoint with optional database connectivity check."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.core.database import check_db_connected, get_db
from portal.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by the hosting platform's health probe; always 200 while the process is up.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        timestamp=datetime.now(UTC),
        environment=settings.APP_ENV,
        database=db_status,
    )
