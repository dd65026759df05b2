"""
Lead Scoring Service - Entry point for single-lead and batch scoring

Pipeline per lead: extract factors -> score -> classify -> recommend ->
persist the snapshot into the lead's custom data.
"""
from datetime import datetime
from typing import Callable, Optional

from lead_scoring.core.config import Settings, settings as default_settings
from lead_scoring.core.exceptions import DatabaseError, LeadScorePersistenceError
from lead_scoring.core.logging import setup_logging
from lead_scoring.schemas.scoring import BatchScoringResult, LeadScore, ScoringFactors
from lead_scoring.services.lead_store import ActivityStore, LeadStore, SQLAlchemyLeadStore
from lead_scoring.services.retry_handler import RetryExhaustedError, RetryWithBackoff
from lead_scoring.services.scoring.batch import BatchRecalculator
from lead_scoring.services.scoring.classifier import classify
from lead_scoring.services.scoring.factor_extractor import FactorExtractor, utc_now
from lead_scoring.services.scoring.lead_scorer import LeadScorer
from lead_scoring.services.scoring.recommendations import generate_recommendations, next_best_action

logger = setup_logging(__name__)


def score_factors(factors: ScoringFactors, scorer: Optional[LeadScorer] = None) -> LeadScore:
    """
    Turn scoring factors into a complete LeadScore.

    Pure: the same factors always produce the same LeadScore.
    """
    scorer = scorer or LeadScorer()
    breakdown = scorer.calculate(factors)
    classification = classify(breakdown.total_score, factors.last_activity_days)

    return LeadScore(
        total_score=breakdown.total_score,
        grade=classification.grade,
        priority=classification.priority,
        risk_level=classification.risk_level,
        sub_scores=breakdown.sub_scores(),
        recommendations=generate_recommendations(factors, breakdown),
        next_best_action=next_best_action(factors)
    )


class LeadScoringService:
    """
    Service for lead scoring operations

    Features:
    - Single-lead scoring (errors surface to the caller)
    - Snapshot persistence with bounded retry
    - Batch recalculation with per-lead failure isolation
    """

    def __init__(
        self,
        lead_store: LeadStore,
        activity_store: ActivityStore,
        scorer: Optional[LeadScorer] = None,
        clock: Optional[Callable[[], datetime]] = None,
        max_concurrency: int = 5,
        lead_timeout_seconds: Optional[float] = 30.0,
        persist_retry: Optional[RetryWithBackoff] = None
    ):
        self.lead_store = lead_store
        self.activity_store = activity_store
        self.scorer = scorer or LeadScorer()
        self.clock = clock or utc_now
        self.extractor = FactorExtractor(lead_store, activity_store, clock=self.clock)
        self.persist_retry = persist_retry or RetryWithBackoff(
            max_retries=2,
            retry_on_exceptions=(DatabaseError,),
            operation="persist lead score"
        )
        self.batch = BatchRecalculator(
            lead_store,
            self._score_and_persist,
            max_concurrency=max_concurrency,
            lead_timeout_seconds=lead_timeout_seconds,
            clock=self.clock
        )

    @classmethod
    def from_settings(cls, config: Settings = default_settings) -> "LeadScoringService":
        """Build a service over the configured database."""
        from lead_scoring.models.database import SessionLocal

        store = SQLAlchemyLeadStore(SessionLocal)
        return cls(
            lead_store=store,
            activity_store=store,
            max_concurrency=config.SCORING_MAX_CONCURRENCY,
            lead_timeout_seconds=config.SCORING_LEAD_TIMEOUT_SECONDS,
            persist_retry=RetryWithBackoff(
                max_retries=config.SCORING_PERSIST_MAX_RETRIES,
                base_delay=config.SCORING_PERSIST_RETRY_BASE_DELAY,
                max_delay=max(10.0, config.SCORING_PERSIST_RETRY_BASE_DELAY),
                retry_on_exceptions=(DatabaseError,),
                operation="persist lead score"
            )
        )

    def score_factors(self, factors: ScoringFactors) -> LeadScore:
        return score_factors(factors, self.scorer)

    async def score_lead(self, lead_id: str, persist: bool = True) -> LeadScore:
        """
        Score one lead.

        Args:
            lead_id: Lead identifier
            persist: Write the snapshot onto the lead (False = read-only)

        Returns:
            The computed LeadScore

        Raises:
            LeadNotFoundError: If the lead does not exist
            LeadScorePersistenceError: If the snapshot could not be written
        """
        factors = await self.extractor.extract(lead_id)
        score = self.score_factors(factors)

        logger.info(
            f"Scored lead {lead_id}: score={score.total_score}, grade={score.grade.value}, "
            f"priority={score.priority.value}, risk={score.risk_level.value}"
        )

        if persist:
            await self.persist_score(lead_id, score)
        return score

    async def persist_score(self, lead_id: str, score: LeadScore) -> None:
        """
        Merge the scoring snapshot into the lead's custom data.

        Raises:
            LeadNotFoundError: If the lead vanished before the write
            LeadScorePersistenceError: If the write failed after retries
        """
        snapshot = score.to_snapshot(self.clock())
        try:
            await self.persist_retry.execute(self.lead_store.merge_custom_data, lead_id, snapshot)
        except RetryExhaustedError as e:
            raise LeadScorePersistenceError(
                lead_id,
                message=f"Failed to persist score for lead {lead_id}: {e.__cause__}",
                details={"attempts": e.attempts}
            ) from e

    async def recalculate(self, campaign_id: Optional[str] = None) -> BatchScoringResult:
        """
        Re-score every lead, or every lead of one campaign.

        Per-lead failures are logged and reported in the result, never raised.
        """
        return await self.batch.run(campaign_id)

    async def _score_and_persist(self, lead_id: str) -> LeadScore:
        return await self.score_lead(lead_id, persist=True)
