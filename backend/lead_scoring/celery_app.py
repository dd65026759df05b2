"""
Celery application configuration for background lead scoring

Batch recalculations run here so API callers do not wait on a full sweep.
"""
from celery import Celery
from celery.signals import task_prerun, task_postrun, task_failure

from lead_scoring.core.config import settings
from lead_scoring.core.logging import setup_logging

logger = setup_logging(__name__)

# Initialize Celery app
celery_app = Celery(
    "lead_scoring",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["lead_scoring.tasks.scoring_tasks"]
)

# Celery configuration
celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task execution
    task_track_started=True,
    task_time_limit=3600,  # Hard timeout: full sweeps over large populations
    task_soft_time_limit=3300,
    task_acks_late=True,  # Acknowledge task after completion (not before)
    task_reject_on_worker_lost=True,  # Requeue if worker dies

    # Worker configuration
    worker_prefetch_multiplier=1,  # Only fetch 1 task at a time (prevents hoarding)

    # Result backend
    result_expires=86400,  # Batch summaries expire after 1 day

    # Routing
    task_routes={
        "recalculate_lead_scores": {"queue": "scoring"},
        "score_lead": {"queue": "scoring"},
    },

    # Periodic task schedule (Celery Beat)
    beat_schedule={
        # Full re-score of every lead once a day
        "nightly-lead-rescore": {
            "task": "recalculate_lead_scores",
            "schedule": 86400.0,  # 24 hours in seconds
            "args": (None,),
        },
    },
)


# Task lifecycle hooks for logging
@task_prerun.connect
def task_prerun_handler(sender=None, task_id=None, task=None, args=None, kwargs=None, **extra):
    """Log when a task starts execution"""
    logger.info(f"Task starting: {task.name} (ID: {task_id})")


@task_postrun.connect
def task_postrun_handler(sender=None, task_id=None, task=None, args=None, kwargs=None, retval=None, **extra):
    """Log when a task completes successfully"""
    logger.info(f"Task completed: {task.name} (ID: {task_id})")


@task_failure.connect
def task_failure_handler(sender=None, task_id=None, exception=None, args=None, kwargs=None, traceback=None, **extra):
    """Log task failures"""
    logger.error(f"Task failed: {sender.name} (ID: {task_id}) - {str(exception)}")


if __name__ == "__main__":
    celery_app.start()
