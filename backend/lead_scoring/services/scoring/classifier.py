"""
Lead classification: grade, priority and risk level
"""
from dataclasses import dataclass

from lead_scoring.schemas.scoring import Grade, Priority, RiskLevel


# Grade thresholds, inclusive lower bounds checked top-down
GRADE_THRESHOLDS = (
    (85, Grade.A),
    (70, Grade.B),
    (55, Grade.C),
    (40, Grade.D),
)

HOT_THRESHOLD = 75
WARM_THRESHOLD = 50

# High risk: gone quiet for over two weeks and scoring below 60
HIGH_RISK_INACTIVE_DAYS = 14
HIGH_RISK_MAX_SCORE = 60
# Medium risk: quiet for over a week, or scoring below 70
MEDIUM_RISK_INACTIVE_DAYS = 7
MEDIUM_RISK_MAX_SCORE = 70


@dataclass(frozen=True)
class Classification:
    grade: Grade
    priority: Priority
    risk_level: RiskLevel


def classify_grade(total_score: int) -> Grade:
    for minimum, grade in GRADE_THRESHOLDS:
        if total_score >= minimum:
            return grade
    return Grade.F


def classify_priority(total_score: int) -> Priority:
    if total_score >= HOT_THRESHOLD:
        return Priority.HOT
    elif total_score >= WARM_THRESHOLD:
        return Priority.WARM
    return Priority.COLD


def classify_risk(total_score: int, last_activity_days: int) -> RiskLevel:
    if last_activity_days > HIGH_RISK_INACTIVE_DAYS and total_score < HIGH_RISK_MAX_SCORE:
        return RiskLevel.HIGH
    elif last_activity_days > MEDIUM_RISK_INACTIVE_DAYS or total_score < MEDIUM_RISK_MAX_SCORE:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def classify(total_score: int, last_activity_days: int) -> Classification:
    """
    Classify a lead from its composite score and recency.

    Args:
        total_score: Composite score (0-100)
        last_activity_days: Days since the most recent activity

    Returns:
        Classification with grade, priority and risk level
    """
    return Classification(
        grade=classify_grade(total_score),
        priority=classify_priority(total_score),
        risk_level=classify_risk(total_score, last_activity_days)
    )
