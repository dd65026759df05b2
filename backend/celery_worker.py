#!/usr/bin/env python3
"""
Celery Worker Entry Point

Launches a worker for background lead scoring (batch recalculation and
single-lead scoring).

Usage:
    # Development (single-threaded, easier debugging)
    python celery_worker.py

    # Production
    celery -A lead_scoring.celery_app worker --loglevel=info --queues=scoring --concurrency=4

    # Nightly full rescore
    celery -A lead_scoring.celery_app beat --loglevel=info
"""
import sys

from redis import Redis
from redis.exceptions import RedisError

from lead_scoring.celery_app import celery_app
from lead_scoring.core.config import settings
from lead_scoring.core.logging import setup_logging

logger = setup_logging(__name__)


def main():
    """
    Start a Celery worker listening on the scoring queue.

    Each batch task already fans out over leads internally, so a small
    worker concurrency is enough.
    """
    logger.info("Starting Celery worker...")

    # Verify Redis connection
    try:
        Redis.from_url(settings.REDIS_URL).ping()
        logger.info(f"Redis connection verified: {settings.REDIS_URL}")
    except RedisError as e:
        logger.error(f"Failed to connect to Redis: {e}")
        sys.exit(1)

    celery_app.worker_main([
        "worker",
        "--loglevel=info",
        "--concurrency=2",
        "--pool=solo",  # Use solo for development, prefork for production
        "--queues=scoring",
        "--hostname=worker@lead-scoring",
        "--without-gossip",
        "--without-mingle",
    ])


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Worker shutdown requested")
        sys.exit(0)
