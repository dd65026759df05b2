"""Health check endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from lead_scoring.core.config import settings
from lead_scoring.models.database import check_database_health

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    version: str
    environment: str
    database: str


@router.get("/health", response_model=HealthResponse)
def health_check():
    """Health check including database connectivity."""
    db_health = check_database_health()

    return HealthResponse(
        status="healthy" if db_health.get("status") == "healthy" else "degraded",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        database=db_health.get("status", "unknown"),
    )
