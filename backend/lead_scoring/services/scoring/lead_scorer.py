"""
Multi-factor lead scoring function

Combines four factor categories into 0-100 sub-scores and one weighted
composite:

1. Demographic (20%): contact completeness + custom data completeness
2. Engagement (35%): email open/click ratios and call answer rate
3. Behavioral (30%): response time, recency, activity volume, consistency
4. Campaign (15%): campaign type and lead source provenance

Everything here is pure; no I/O, no clock.
"""
import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

from pydantic import BaseModel, Field, model_validator

from lead_scoring.core.logging import setup_logging
from lead_scoring.schemas.scoring import ScoringFactors, SubScores

logger = setup_logging(__name__)


class ScoringWeights(BaseModel):
    """Scoring weights and point tables for every factor category"""

    # Category weights
    demographic: float = Field(default=0.20, ge=0, le=1.0, description="Weight for demographic factor")
    engagement: float = Field(default=0.35, ge=0, le=1.0, description="Weight for engagement factor")
    behavioral: float = Field(default=0.30, ge=0, le=1.0, description="Weight for behavioral factor")
    campaign: float = Field(default=0.15, ge=0, le=1.0, description="Weight for campaign factor")

    # Demographic points
    demographic_points: Dict[str, int] = Field(default_factory=lambda: {
        "has_email": 15,
        "has_phone": 20,
        "has_job_title": 10,
        "has_company": 15,
    })
    custom_data_max_points: float = 40  # Max 40 points for complete custom data

    # Engagement multipliers and per-component caps
    email_open_multiplier: float = 2.0
    email_click_multiplier: float = 3.0
    call_answer_multiplier: float = 4.0
    rate_scale: float = 20
    email_open_cap: float = 30
    email_click_cap: float = 35
    call_answer_cap: float = 35

    # Behavioral buckets: (upper bound inclusive, points), checked in order
    response_time_buckets: List[Tuple[float, int]] = Field(
        default_factory=lambda: [(1, 30), (4, 25), (24, 15), (72, 10)]
    )
    response_time_slowest_points: int = 5
    recency_buckets: List[Tuple[int, int]] = Field(
        default_factory=lambda: [(1, 25), (3, 20), (7, 15), (14, 10), (30, 5)]
    )
    # (minimum activity count, points), checked in order
    volume_buckets: List[Tuple[int, int]] = Field(
        default_factory=lambda: [(10, 25), (5, 20), (3, 15), (1, 10)]
    )
    consistency_bonus: int = 20
    consistency_window_days: int = 7

    # Campaign provenance
    campaign_base: int = 50
    campaign_type_points: Dict[str, int] = Field(default_factory=lambda: {
        "premium": 30,
        "enterprise": 30,
        "standard": 20,
        "basic": 10,
    })
    lead_source_points: Dict[str, int] = Field(default_factory=lambda: {
        "referral": 20,
        "inbound": 20,
        "linkedin": 15,
        "social": 15,
        "cold_email": 10,
        "cold_call": 5,
    })

    @model_validator(mode="after")
    def validate_weight_sum(self):
        """Ensure category weights sum to 1.0"""
        total = self.demographic + self.engagement + self.behavioral + self.campaign
        if not (0.99 <= total <= 1.01):  # Allow small floating point errors
            raise ValueError(f"Weights must sum to 1.0, got {total}")
        return self


DEFAULT_WEIGHTS = ScoringWeights()


def round_half_up(value: float) -> int:
    """Round .5 upwards (Python's round() would round to even)"""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return min(max(value, low), high)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Clamped but unrounded category scores plus the composite"""
    demographic: float
    engagement: float
    behavioral: float
    campaign: float
    total_score: int

    def sub_scores(self) -> SubScores:
        return SubScores(
            demographic=round_half_up(self.demographic),
            engagement=round_half_up(self.engagement),
            behavioral=round_half_up(self.behavioral),
            campaign=round_half_up(self.campaign)
        )


class LeadScorer:
    """Weighted four-category lead scoring function"""

    def __init__(self, weights: ScoringWeights = DEFAULT_WEIGHTS):
        """
        Args:
            weights: Weights and point tables (defaults to the fixed CRM values)
        """
        self.weights = weights

    def calculate(self, factors: ScoringFactors) -> ScoreBreakdown:
        """
        Score all four categories and combine them.

        Args:
            factors: Normalized scoring factors for one lead

        Returns:
            ScoreBreakdown with clamped category scores and integer total
        """
        demographic = self.demographic_score(factors)
        engagement = self.engagement_score(factors)
        behavioral = self.behavioral_score(factors)
        campaign = self.campaign_score(factors)

        total = round_half_up(
            demographic * self.weights.demographic +
            engagement * self.weights.engagement +
            behavioral * self.weights.behavioral +
            campaign * self.weights.campaign
        )

        return ScoreBreakdown(
            demographic=demographic,
            engagement=engagement,
            behavioral=behavioral,
            campaign=campaign,
            total_score=int(clamp(total))
        )

    def demographic_score(self, factors: ScoringFactors) -> float:
        points = self.weights.demographic_points
        score = 0.0
        score += points["has_email"] if factors.has_email else 0
        score += points["has_phone"] if factors.has_phone else 0
        score += points["has_job_title"] if factors.has_job_title else 0
        score += points["has_company"] if factors.has_company else 0
        score += (factors.custom_data_completeness / 100) * self.weights.custom_data_max_points
        return clamp(score)

    def engagement_score(self, factors: ScoringFactors) -> float:
        """
        Email and call engagement.

        NOTE: the open rate divides by clicks and the click rate divides by
        opens. This is inverted relative to the names but is the arithmetic
        the CRM has always shipped; it stays until product signs off on a
        change.
        """
        w = self.weights
        open_rate = factors.email_opens / factors.email_clicks if factors.email_clicks > 0 else 0
        click_rate = factors.email_clicks / factors.email_opens if factors.email_opens > 0 else 0
        answer_rate = factors.calls_answered / factors.calls_attempted if factors.calls_attempted > 0 else 0

        score = 0.0
        score += min(open_rate * w.email_open_multiplier * w.rate_scale, w.email_open_cap)
        score += min(click_rate * w.email_click_multiplier * w.rate_scale, w.email_click_cap)
        score += min(answer_rate * w.call_answer_multiplier * w.rate_scale, w.call_answer_cap)
        return clamp(score)

    def behavioral_score(self, factors: ScoringFactors) -> float:
        w = self.weights
        score = 0.0

        # Response time (faster response = higher score); 0 means too few activities
        if factors.response_time_hours > 0:
            score += self._bucket_at_most(
                factors.response_time_hours,
                w.response_time_buckets,
                w.response_time_slowest_points
            )

        # Activity recency (more recent = higher score)
        score += self._bucket_at_most(factors.last_activity_days, w.recency_buckets, 0)

        # Total activities (more engagement = higher score)
        for minimum, points in w.volume_buckets:
            if factors.total_activities >= minimum:
                score += points
                break

        # Activity consistency bonus
        if factors.total_activities > 0 and factors.last_activity_days <= w.consistency_window_days:
            score += w.consistency_bonus

        return clamp(score)

    def campaign_score(self, factors: ScoringFactors) -> float:
        w = self.weights
        score = float(w.campaign_base)
        score += w.campaign_type_points.get((factors.campaign_type or "").lower(), 0)
        score += w.lead_source_points.get((factors.lead_source or "").lower(), 0)
        return clamp(score)

    @staticmethod
    def _bucket_at_most(value: float, buckets: List[Tuple[float, int]], fallback: int) -> int:
        for upper, points in buckets:
            if value <= upper:
                return points
        return fallback
