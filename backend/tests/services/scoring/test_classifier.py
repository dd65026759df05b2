"""
Tests for grade, priority and risk classification
"""
import pytest

from lead_scoring.schemas.scoring import Grade, Priority, RiskLevel
from lead_scoring.services.scoring.classifier import (
    classify,
    classify_grade,
    classify_priority,
    classify_risk,
)


@pytest.mark.parametrize("score,grade", [
    (100, Grade.A),
    (85, Grade.A),
    (84, Grade.B),
    (70, Grade.B),
    (69, Grade.C),
    (55, Grade.C),
    (54, Grade.D),
    (40, Grade.D),
    (39, Grade.F),
    (0, Grade.F),
])
def test_grade_thresholds(score, grade):
    assert classify_grade(score) == grade


@pytest.mark.parametrize("score,priority", [
    (100, Priority.HOT),
    (75, Priority.HOT),
    (74, Priority.WARM),
    (50, Priority.WARM),
    (49, Priority.COLD),
    (0, Priority.COLD),
])
def test_priority_thresholds(score, priority):
    assert classify_priority(score) == priority


@pytest.mark.parametrize("score,days,risk", [
    (59, 15, RiskLevel.HIGH),
    (0, 400, RiskLevel.HIGH),
    (60, 15, RiskLevel.MEDIUM),   # stale but scoring 60+
    (59, 14, RiskLevel.MEDIUM),   # low score, only two weeks quiet
    (80, 8, RiskLevel.MEDIUM),    # high score but quiet for over a week
    (69, 0, RiskLevel.MEDIUM),    # active but below 70
    (70, 7, RiskLevel.LOW),
    (95, 0, RiskLevel.LOW),
])
def test_risk_levels(score, days, risk):
    assert classify_risk(score, days) == risk


def test_grade_is_monotonic():
    order = [Grade.F, Grade.D, Grade.C, Grade.B, Grade.A]
    ranks = [order.index(classify_grade(score)) for score in range(0, 101)]
    assert ranks == sorted(ranks)


def test_classify_combines_all_three():
    result = classify(98, 1)
    assert result.grade == Grade.A
    assert result.priority == Priority.HOT
    assert result.risk_level == RiskLevel.LOW

    result = classify(9, 40)
    assert result.grade == Grade.F
    assert result.priority == Priority.COLD
    assert result.risk_level == RiskLevel.HIGH
