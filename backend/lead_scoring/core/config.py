"""Application configuration using pydantic settings."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Project info
    PROJECT_NAME: str = "Lead Scoring API"
    VERSION: str = "0.1.0"

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"

    # Database - the CRM's relational store
    DATABASE_URL: str = "sqlite:///./lead_scoring.db"
    DATABASE_ECHO: bool = False

    # Redis (Celery broker and result backend)
    REDIS_URL: str = "redis://localhost:6379/0"

    # Batch recalculation
    SCORING_MAX_CONCURRENCY: int = Field(default=5, ge=1)  # Leads scored in parallel
    SCORING_LEAD_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)  # Per-lead pipeline timeout
    SCORING_PERSIST_MAX_RETRIES: int = Field(default=2, ge=0)  # Retries around the snapshot write
    SCORING_PERSIST_RETRY_BASE_DELAY: float = Field(default=0.5, gt=0)  # Seconds

    # Logging
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    class Config:
        env_file = "../.env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra environment variables not defined in Settings


# Create global settings instance
settings = Settings()
