"""
Lead scoring API endpoints
"""
from functools import lru_cache
from typing import Union

from fastapi import APIRouter, Depends, Query

from lead_scoring.core.logging import setup_logging
from lead_scoring.schemas.scoring import (
    BatchScoringResponse,
    LeadScoreResponse,
    LeadScoringRequest,
)
from lead_scoring.services.lead_scoring_service import LeadScoringService

logger = setup_logging(__name__)

router = APIRouter(prefix="/leads/scoring", tags=["lead-scoring"])


@lru_cache
def get_scoring_service() -> LeadScoringService:
    """Dependency returning the shared scoring service"""
    return LeadScoringService.from_settings()


@router.get("", response_model=LeadScoreResponse)
async def get_lead_score(
    lead_id: str = Query(..., description="Lead to score"),
    service: LeadScoringService = Depends(get_scoring_service)
):
    """
    Compute a lead's current score without writing it back.
    """
    score = await service.score_lead(lead_id, persist=False)
    return LeadScoreResponse(lead_id=lead_id, score=score)


@router.post("", response_model=Union[LeadScoreResponse, BatchScoringResponse])
async def recalculate_lead_scores(
    request: LeadScoringRequest,
    service: LeadScoringService = Depends(get_scoring_service)
):
    """
    Score one lead, or re-score a lead population.

    - With `lead_id`: score and persist that lead, return its score
    - Otherwise: re-score all leads (or those of `campaign_id`) and return
      the batch summary
    """
    if request.lead_id:
        score = await service.score_lead(request.lead_id)
        return LeadScoreResponse(lead_id=request.lead_id, score=score)

    logger.info(f"Batch score recalculation requested (campaign={request.campaign_id or 'all'})")
    result = await service.recalculate(request.campaign_id)
    message = (
        f"Updated scores for campaign {request.campaign_id}"
        if request.campaign_id
        else "Updated scores for all leads"
    )
    return BatchScoringResponse(message=message, result=result)
