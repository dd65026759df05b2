"""
Pydantic schemas for lead scoring inputs, outputs and store records
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# Store records (typed views over the CRM's lead/activity/campaign rows)
# ============================================================================

class ContactData(BaseModel):
    """Structured contact fields of a lead"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    email: Optional[str] = None
    phone: Optional[str] = None
    job_title: Optional[str] = Field(None, alias="jobTitle")
    company: Optional[str] = None

    @field_validator("email", "phone", "job_title", "company", mode="before")
    @classmethod
    def coerce_to_text(cls, v):
        # Falsy non-text values (False, 0) mean "not provided"
        if v is None or (not isinstance(v, str) and not v):
            return None
        return str(v)

    def has(self, field: str) -> bool:
        """True when the field is present and non-empty"""
        value = getattr(self, field)
        return value is not None and value != ""


class ActivityMetadata(BaseModel):
    """
    Engagement flags recorded on an activity.

    Values are coerced by truthiness so that `1`, `"yes"` and `True` all
    count; anything else in the bag is ignored.
    """
    model_config = ConfigDict(extra="ignore")

    opened: Optional[bool] = None
    clicked: Optional[bool] = None
    answered: Optional[bool] = None

    @field_validator("opened", "clicked", "answered", mode="before")
    @classmethod
    def coerce_truthy(cls, v):
        if v is None:
            return None
        return bool(v)

    @classmethod
    def from_raw(cls, raw: Any) -> "ActivityMetadata":
        """Build from an untyped metadata bag; non-mappings degrade to empty"""
        if not isinstance(raw, dict):
            return cls()
        return cls.model_validate(raw)

    def opened_flag(self) -> bool:
        return bool(self.opened)

    def clicked_flag(self) -> bool:
        return bool(self.clicked)

    def answered_flag(self) -> bool:
        return bool(self.answered)


class ActivityRecord(BaseModel):
    """A timestamped interaction attached to a lead"""
    type: str
    created_at: datetime
    metadata: ActivityMetadata = Field(default_factory=ActivityMetadata)

    @field_validator("metadata", mode="before")
    @classmethod
    def parse_metadata(cls, v):
        if isinstance(v, ActivityMetadata):
            return v
        return ActivityMetadata.from_raw(v)


class CampaignRecord(BaseModel):
    """Campaign a lead belongs to"""
    id: str
    name: Optional[str] = None


class LeadRecord(BaseModel):
    """Lead as seen by the scoring engine"""
    id: str
    contact: ContactData = Field(default_factory=ContactData)
    custom_data: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    campaign_id: Optional[str] = None
    campaign: Optional[CampaignRecord] = None

    @field_validator("custom_data", mode="before")
    @classmethod
    def default_custom_data(cls, v):
        return v if isinstance(v, dict) else {}


# ============================================================================
# Scoring inputs and outputs
# ============================================================================

class ScoringFactors(BaseModel):
    """Normalized signals about a lead, derived at scoring time"""

    # Demographic factors
    has_email: bool = False
    has_phone: bool = False
    has_job_title: bool = False
    has_company: bool = False
    custom_data_completeness: float = Field(default=0.0, ge=0, le=100, description="Percentage of custom fields filled")

    # Engagement factors
    email_opens: int = Field(default=0, ge=0)
    email_clicks: int = Field(default=0, ge=0)
    calls_answered: int = Field(default=0, ge=0)
    calls_attempted: int = Field(default=0, ge=0)

    # Behavioral factors
    response_time_hours: float = Field(default=0.0, ge=0, description="Mean gap between adjacent activities")
    last_activity_days: int = Field(default=0, ge=0, description="Days since last activity")
    total_activities: int = Field(default=0, ge=0)

    # Campaign factors
    campaign_type: str = "standard"
    lead_source: str = "unknown"

    model_config = {
        "json_schema_extra": {
            "example": {
                "has_email": True,
                "has_phone": True,
                "has_job_title": False,
                "has_company": True,
                "custom_data_completeness": 75.0,
                "email_opens": 4,
                "email_clicks": 1,
                "calls_answered": 1,
                "calls_attempted": 3,
                "response_time_hours": 18.5,
                "last_activity_days": 2,
                "total_activities": 7,
                "campaign_type": "enterprise",
                "lead_source": "linkedin"
            }
        }
    }


class Grade(str, Enum):
    """Letter grade derived from the composite score"""
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class Priority(str, Enum):
    """Triage tier"""
    HOT = "Hot"
    WARM = "Warm"
    COLD = "Cold"


class RiskLevel(str, Enum):
    """Likelihood-of-loss estimate"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class SubScores(BaseModel):
    """Per-category scores, each 0-100"""
    demographic: int = Field(..., ge=0, le=100)
    engagement: int = Field(..., ge=0, le=100)
    behavioral: int = Field(..., ge=0, le=100)
    campaign: int = Field(..., ge=0, le=100)


class LeadScore(BaseModel):
    """Result of one scoring run for one lead"""
    total_score: int = Field(..., ge=0, le=100, description="Weighted composite score")
    grade: Grade
    priority: Priority
    risk_level: RiskLevel
    sub_scores: SubScores
    recommendations: List[str] = Field(default_factory=list)
    next_best_action: str

    def to_snapshot(self, scored_at: datetime) -> Dict[str, Any]:
        """Custom-data keys written onto the lead record"""
        return {
            "leadScore": self.total_score,
            "leadGrade": self.grade.value,
            "leadPriority": self.priority.value,
            "riskLevel": self.risk_level.value,
            "nextBestAction": self.next_best_action,
            "scoringFactors": self.sub_scores.model_dump(),
            "recommendations": list(self.recommendations),
            "lastScored": scored_at.isoformat(),
        }

    model_config = {
        "json_schema_extra": {
            "example": {
                "total_score": 78,
                "grade": "B",
                "priority": "Hot",
                "risk_level": "Low",
                "sub_scores": {
                    "demographic": 90,
                    "engagement": 62,
                    "behavioral": 85,
                    "campaign": 95
                },
                "recommendations": ["Try different calling times or email first"],
                "next_best_action": "Send personalized email"
            }
        }
    }


# ============================================================================
# Batch recalculation
# ============================================================================

class FailedLead(BaseModel):
    """A lead the batch could not score or persist"""
    lead_id: str
    error: str
    error_type: str


class BatchScoringResult(BaseModel):
    """Outcome of a batch recalculation"""
    campaign_id: Optional[str] = None
    total: int = 0
    succeeded: List[str] = Field(default_factory=list)
    failed: List[FailedLead] = Field(default_factory=list)
    started_at: datetime
    finished_at: Optional[datetime] = None


# ============================================================================
# API request/response
# ============================================================================

class LeadScoringRequest(BaseModel):
    """Body of POST /leads/scoring"""
    lead_id: Optional[str] = Field(None, description="Score a single lead")
    campaign_id: Optional[str] = Field(None, description="Restrict a batch run to one campaign")


class LeadScoreResponse(BaseModel):
    """Single-lead scoring response"""
    lead_id: str
    score: LeadScore


class BatchScoringResponse(BaseModel):
    """Batch recalculation response"""
    message: str
    result: BatchScoringResult
