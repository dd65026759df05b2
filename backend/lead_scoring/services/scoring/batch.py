"""
Batch recalculation of lead scores

Scores every lead in scope with a bounded worker pool. Each lead runs its
whole pipeline (extract, score, persist) under its own timeout, and any
failure is recorded against that lead only; the sweep always attempts every
lead in scope.
"""
import asyncio
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

from lead_scoring.core.exceptions import ConfigurationError, LeadScoringTimeoutError
from lead_scoring.core.logging import setup_logging
from lead_scoring.schemas.scoring import BatchScoringResult, FailedLead
from lead_scoring.services.lead_store import LeadStore
from lead_scoring.services.scoring.factor_extractor import utc_now

logger = setup_logging(__name__)


class BatchRecalculator:
    """
    Re-scores a lead population with per-lead failure isolation.

    Args:
        lead_store: Source of lead ids
        score_lead: Coroutine function scoring and persisting one lead
        max_concurrency: Leads processed in parallel (>= 1)
        lead_timeout_seconds: Budget for one lead's whole pipeline
        clock: Time source for the result timestamps
    """

    def __init__(
        self,
        lead_store: LeadStore,
        score_lead: Callable[[str], Awaitable[Any]],
        max_concurrency: int = 5,
        lead_timeout_seconds: Optional[float] = 30.0,
        clock: Optional[Callable[[], datetime]] = None
    ):
        if max_concurrency < 1:
            raise ConfigurationError(
                "max_concurrency must be >= 1",
                details={"max_concurrency": max_concurrency}
            )
        self.lead_store = lead_store
        self.score_lead = score_lead
        self.max_concurrency = max_concurrency
        self.lead_timeout_seconds = lead_timeout_seconds
        self.clock = clock or utc_now

    async def run(self, campaign_id: Optional[str] = None) -> BatchScoringResult:
        """
        Score all leads, or only those of one campaign.

        Args:
            campaign_id: Restrict the sweep to this campaign (None = all leads)

        Returns:
            BatchScoringResult listing succeeded and failed lead ids

        Raises:
            DatabaseError: If the lead ids cannot be listed at all
        """
        lead_ids = await self.lead_store.list_lead_ids(campaign_id)
        result = BatchScoringResult(
            campaign_id=campaign_id,
            total=len(lead_ids),
            started_at=self.clock()
        )

        logger.info(
            f"Recalculating scores for {len(lead_ids)} leads "
            f"(campaign={campaign_id or 'all'}, concurrency={self.max_concurrency})"
        )

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def process(lead_id: str):
            async with semaphore:
                try:
                    await self._score_with_timeout(lead_id)
                except Exception as e:
                    logger.error(f"Failed to score lead {lead_id}: {type(e).__name__}: {e}")
                    result.failed.append(
                        FailedLead(lead_id=lead_id, error=str(e), error_type=type(e).__name__)
                    )
                else:
                    logger.debug(f"Scored lead {lead_id}")
                    result.succeeded.append(lead_id)

        await asyncio.gather(*(process(lead_id) for lead_id in lead_ids))

        result.finished_at = self.clock()
        logger.info(
            f"Score recalculation finished (campaign={campaign_id or 'all'}): "
            f"{len(result.succeeded)} succeeded, {len(result.failed)} failed"
        )
        return result

    async def _score_with_timeout(self, lead_id: str):
        """
        Run one lead under the timeout. A write already handed to a worker
        thread is not rolled back, so a timed-out lead may still be persisted.
        """
        if self.lead_timeout_seconds is None:
            return await self.score_lead(lead_id)
        try:
            return await asyncio.wait_for(self.score_lead(lead_id), timeout=self.lead_timeout_seconds)
        except asyncio.TimeoutError:
            raise LeadScoringTimeoutError(lead_id, self.lead_timeout_seconds)
