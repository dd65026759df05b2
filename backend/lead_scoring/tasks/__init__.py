"""
Celery tasks package

Background lead scoring: single-lead scoring and batch recalculation.
"""
from lead_scoring.tasks.scoring_tasks import (
    recalculate_lead_scores_task,
    score_lead_task
)

__all__ = [
    "recalculate_lead_scores_task",
    "score_lead_task"
]
