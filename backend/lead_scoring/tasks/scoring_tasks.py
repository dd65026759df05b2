"""
Celery tasks for lead scoring

- score_lead: score and persist one lead
- recalculate_lead_scores: batch sweep over all leads or one campaign
"""
import asyncio
from typing import Any, Dict, Optional

from celery.exceptions import SoftTimeLimitExceeded

from lead_scoring.celery_app import celery_app
from lead_scoring.core.exceptions import DatabaseError, LeadNotFoundError
from lead_scoring.core.logging import setup_logging
from lead_scoring.services.lead_scoring_service import LeadScoringService

logger = setup_logging(__name__)


def get_service() -> LeadScoringService:
    return LeadScoringService.from_settings()


@celery_app.task(name="score_lead", bind=True, max_retries=3)
def score_lead_task(self, lead_id: str) -> Dict[str, Any]:
    """
    Score one lead and persist its snapshot.

    Unknown leads are reported, not retried. Database failures are retried
    with exponential backoff (1s, 2s, 4s).
    """
    try:
        score = asyncio.run(get_service().score_lead(lead_id))
        return {"lead_id": lead_id, "score": score.model_dump(mode="json")}

    except LeadNotFoundError as exc:
        return {"lead_id": lead_id, "error": exc.message}

    except DatabaseError as exc:
        logger.error(f"Error scoring lead {lead_id}: {exc}")
        countdown = 2 ** self.request.retries
        raise self.retry(exc=exc, countdown=countdown)


@celery_app.task(name="recalculate_lead_scores", bind=True)
def recalculate_lead_scores_task(self, campaign_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Re-score every lead, or every lead of one campaign.

    Per-lead failures are isolated by the batch and reported in the
    returned summary.
    """
    logger.info(f"Batch rescore task started (campaign={campaign_id or 'all'})")
    try:
        result = asyncio.run(get_service().recalculate(campaign_id))
    except SoftTimeLimitExceeded:
        logger.warning(f"Soft time limit exceeded for batch rescore (campaign={campaign_id or 'all'})")
        raise

    return result.model_dump(mode="json")
