"""
Custom Exception Hierarchy for the Lead Scoring Engine

Provides domain-specific exceptions with structured error codes, logging,
and user-friendly messages for better debugging and error handling.
"""

import logging
from typing import Optional, Dict, Any
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


class LeadScoringException(Exception):
    """
    Base exception for all lead scoring errors.

    Attributes:
        error_code: Unique error identifier for logging/debugging
        message: User-friendly error message
        details: Technical details for logging (not exposed to users)
        status_code: HTTP status code (default: 500)
    """

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.timestamp = datetime.now(timezone.utc).isoformat()

        # Log the error with full context
        logger.error(
            f"[{error_code}] {message}",
            extra={
                "error_code": error_code,
                "details": details,
                "status_code": status_code,
                "timestamp": self.timestamp
            }
        )

        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "timestamp": self.timestamp
        }


# ============================================================================
# Resource Errors
# ============================================================================

class ResourceNotFoundError(LeadScoringException):
    """Resource not found errors."""

    def __init__(
        self,
        message: str = "Resource not found",
        error_code: str = "RESOURCE_NOT_FOUND",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=404  # Not Found
        )


class LeadNotFoundError(ResourceNotFoundError):
    """Lead not found errors."""

    def __init__(
        self,
        lead_id: Any,
        details: Optional[Dict[str, Any]] = None
    ):
        if details is None:
            details = {}
        details["lead_id"] = lead_id
        self.lead_id = lead_id

        super().__init__(
            message=f"Lead with ID {lead_id} not found",
            error_code="LEAD_NOT_FOUND",
            details=details
        )


# ============================================================================
# Database Errors
# ============================================================================

class DatabaseError(LeadScoringException):
    """Errors during database operations."""

    def __init__(
        self,
        message: str = "Database operation failed",
        error_code: str = "DATABASE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=500
        )


class LeadScorePersistenceError(DatabaseError):
    """Writing a scoring snapshot onto a lead failed."""

    def __init__(
        self,
        lead_id: Any,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if details is None:
            details = {}
        details["lead_id"] = lead_id
        self.lead_id = lead_id

        super().__init__(
            message=message or f"Failed to persist score for lead {lead_id}",
            error_code="LEAD_SCORE_PERSISTENCE_FAILED",
            details=details
        )


# ============================================================================
# Scoring Errors
# ============================================================================

class LeadScoringTimeoutError(LeadScoringException):
    """A single lead's scoring pipeline exceeded its time budget."""

    def __init__(
        self,
        lead_id: Any,
        timeout_seconds: float,
        details: Optional[Dict[str, Any]] = None
    ):
        if details is None:
            details = {}
        details.update({"lead_id": lead_id, "timeout_seconds": timeout_seconds})
        self.lead_id = lead_id

        super().__init__(
            message=f"Scoring lead {lead_id} timed out after {timeout_seconds}s",
            error_code="LEAD_SCORING_TIMEOUT",
            details=details,
            status_code=504  # Gateway Timeout
        )


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigurationError(LeadScoringException):
    """Configuration and setup errors."""

    def __init__(
        self,
        message: str = "Configuration error",
        error_code: str = "CONFIGURATION_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=500
        )
