"""
Pytest configuration and fixtures for the lead scoring test suite.

Provides an in-memory lead/activity store with failure injection, a fixed
clock, a scoring service wired to both, and a factory for scoring factors.
"""

import os

# Keep tests off any real database before settings are loaded
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from lead_scoring.core.exceptions import DatabaseError
from lead_scoring.schemas.scoring import CampaignRecord, ScoringFactors
from lead_scoring.services.lead_scoring_service import LeadScoringService
from lead_scoring.services.retry_handler import RetryWithBackoff
from tests.factories import NOW, InMemoryLeadStore, activity


@pytest.fixture
def clock():
    """Fixed time source."""
    return lambda: NOW


@pytest.fixture
def store():
    """Empty in-memory store."""
    return InMemoryLeadStore()


@pytest.fixture
def fast_retry():
    """Persistence retry with millisecond delays."""
    return RetryWithBackoff(
        max_retries=2,
        base_delay=0.001,
        max_delay=0.01,
        retry_on_exceptions=(DatabaseError,)
    )


@pytest.fixture
def scoring_service(store, clock, fast_retry):
    """Scoring service over the in-memory store."""
    return LeadScoringService(
        lead_store=store,
        activity_store=store,
        clock=clock,
        max_concurrency=3,
        lead_timeout_seconds=1.0,
        persist_retry=fast_retry
    )


@pytest.fixture
def make_factors():
    """Factory for ScoringFactors with a neutral baseline."""
    def _make(**overrides) -> ScoringFactors:
        values = {
            "has_email": False,
            "has_phone": False,
            "has_job_title": False,
            "has_company": False,
            "custom_data_completeness": 0,
            "email_opens": 0,
            "email_clicks": 0,
            "calls_answered": 0,
            "calls_attempted": 0,
            "response_time_hours": 0,
            "last_activity_days": 40,
            "total_activities": 0,
            "campaign_type": "other",
            "lead_source": "unknown",
        }
        values.update(overrides)
        return ScoringFactors(**values)
    return _make


@pytest.fixture
def engaged_lead(store):
    """
    Lead with email/phone, 2 of 3 custom fields filled and three recent
    activities, in an Enterprise campaign from a referral.
    """
    return store.add_lead(
        "lead-engaged",
        contact={"email": "dana@northwind.example", "phone": "+1-555-0100"},
        custom_data={"source": "referral", "industry": "SaaS", "notes": ""},
        campaign=CampaignRecord(id="camp-ent", name="Enterprise"),
        activities=[
            activity("EMAIL", days_ago=1, opened=True, clicked=True),
            activity("CALL", days_ago=2, answered=True),
            activity("EMAIL", days_ago=3, opened=True),
        ]
    )
