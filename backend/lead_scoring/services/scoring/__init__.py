"""Lead scoring engine: factor extraction, scoring, classification, recommendations."""

from .lead_scorer import LeadScorer, ScoringWeights, ScoreBreakdown, DEFAULT_WEIGHTS
from .classifier import Classification, classify
from .recommendations import generate_recommendations, next_best_action
from .factor_extractor import FactorExtractor, build_factors
from .batch import BatchRecalculator

__all__ = [
    "LeadScorer",
    "ScoringWeights",
    "ScoreBreakdown",
    "DEFAULT_WEIGHTS",
    "Classification",
    "classify",
    "generate_recommendations",
    "next_best_action",
    "FactorExtractor",
    "build_factors",
    "BatchRecalculator",
]
