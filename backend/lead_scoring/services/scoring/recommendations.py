"""
Rule-based recommendations and next best action

Both lists are evaluated in a fixed order. Every recommendation rule fires
at most once and output order follows rule order. The next best action is
simply the first rule that matches.
"""
from typing import Callable, List, NamedTuple, Tuple

from lead_scoring.schemas.scoring import ScoringFactors
from lead_scoring.services.scoring.lead_scorer import ScoreBreakdown


class RecommendationRule(NamedTuple):
    name: str
    applies: Callable[[ScoringFactors, ScoreBreakdown], bool]
    text: str


RECOMMENDATION_RULES: Tuple[RecommendationRule, ...] = (
    RecommendationRule(
        "missing_email",
        lambda f, s: not f.has_email,
        "Obtain email address for better communication"
    ),
    RecommendationRule(
        "missing_phone",
        lambda f, s: not f.has_phone,
        "Get phone number for direct contact"
    ),
    RecommendationRule(
        "going_cold",
        lambda f, s: f.last_activity_days > 7,
        "Follow up immediately - lead is getting cold"
    ),
    RecommendationRule(
        "calls_unanswered",
        lambda f, s: f.calls_attempted > 0 and f.calls_answered == 0,
        "Try different calling times or email first"
    ),
    RecommendationRule(
        "clicks_without_opens",
        lambda f, s: f.email_opens == 0 and f.email_clicks > 0,
        "Improve email subject lines"
    ),
    RecommendationRule(
        "thin_custom_data",
        lambda f, s: f.custom_data_completeness < 50,
        "Gather more qualifying information"
    ),
    RecommendationRule(
        "low_engagement",
        lambda f, s: s.engagement < 30,
        "Increase engagement with personalized content"
    ),
    RecommendationRule(
        "high_quality",
        lambda f, s: s.total_score >= 80,
        "High-quality lead - prioritize for immediate contact"
    ),
)


RE_ENGAGEMENT_CAMPAIGN = "Re-engagement campaign"
SCHEDULE_FOLLOW_UP_CALL = "Schedule follow-up call"
SEND_PERSONALIZED_EMAIL = "Send personalized email"
MAKE_PHONE_CALL = "Make phone call"
SEND_INITIAL_EMAIL = "Send initial email"


def generate_recommendations(factors: ScoringFactors, scores: ScoreBreakdown) -> List[str]:
    """
    Evaluate the recommendation rules against a scored lead.

    Args:
        factors: Scoring factors for the lead
        scores: Category scores and composite for the same factors

    Returns:
        Recommendation texts in rule order
    """
    return [rule.text for rule in RECOMMENDATION_RULES if rule.applies(factors, scores)]


def next_best_action(factors: ScoringFactors) -> str:
    if factors.last_activity_days > 14:
        return RE_ENGAGEMENT_CAMPAIGN
    elif factors.calls_answered > 0:
        return SCHEDULE_FOLLOW_UP_CALL
    elif factors.email_opens > 0:
        return SEND_PERSONALIZED_EMAIL
    elif factors.has_phone:
        return MAKE_PHONE_CALL
    return SEND_INITIAL_EMAIL
