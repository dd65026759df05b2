"""Business logic services package."""

from .lead_store import LeadStore, ActivityStore, SQLAlchemyLeadStore
from .lead_scoring_service import LeadScoringService, score_factors

__all__ = [
    "LeadStore",
    "ActivityStore",
    "SQLAlchemyLeadStore",
    "LeadScoringService",
    "score_factors",
]
