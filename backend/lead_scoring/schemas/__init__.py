"""Pydantic schemas for request/response validation."""

from .scoring import (
    ContactData,
    ActivityMetadata,
    ActivityRecord,
    CampaignRecord,
    LeadRecord,
    ScoringFactors,
    Grade,
    Priority,
    RiskLevel,
    SubScores,
    LeadScore,
    FailedLead,
    BatchScoringResult,
    LeadScoringRequest,
    LeadScoreResponse,
    BatchScoringResponse
)

__all__ = [
    "ContactData",
    "ActivityMetadata",
    "ActivityRecord",
    "CampaignRecord",
    "LeadRecord",
    "ScoringFactors",
    "Grade",
    "Priority",
    "RiskLevel",
    "SubScores",
    "LeadScore",
    "FailedLead",
    "BatchScoringResult",
    "LeadScoringRequest",
    "LeadScoreResponse",
    "BatchScoringResponse"
]
