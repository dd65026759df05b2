"""
Factor extraction: raw lead, activity and campaign records -> ScoringFactors

Missing related data never raises; it degrades to defaults (no campaign ->
"standard", no source -> "unknown", no activities -> recency measured from
lead creation).
"""
from datetime import datetime, timezone
from typing import Callable, List, Optional

from lead_scoring.core.exceptions import LeadNotFoundError
from lead_scoring.core.logging import setup_logging
from lead_scoring.models.activity import ActivityType
from lead_scoring.schemas.scoring import ActivityRecord, LeadRecord, ScoringFactors
from lead_scoring.services.lead_store import ActivityStore, LeadStore

logger = setup_logging(__name__)

DEFAULT_CAMPAIGN_TYPE = "standard"
DEFAULT_LEAD_SOURCE = "unknown"

SECONDS_PER_HOUR = 60 * 60
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; treat them as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _is_filled(value) -> bool:
    return value is not None and value != ""


def custom_data_completeness(custom_data: dict) -> float:
    """Percentage of custom fields holding a non-empty value"""
    if not custom_data:
        return 0.0
    filled = sum(1 for value in custom_data.values() if _is_filled(value))
    return filled / len(custom_data) * 100


def mean_response_time_hours(activities: List[ActivityRecord]) -> float:
    """Average gap in hours between adjacent activities, 0 if fewer than two"""
    if len(activities) < 2:
        return 0.0

    ordered = sorted(activities, key=lambda a: _as_utc(a.created_at), reverse=True)
    gaps = [
        (_as_utc(newer.created_at) - _as_utc(older.created_at)).total_seconds() / SECONDS_PER_HOUR
        for newer, older in zip(ordered, ordered[1:])
    ]
    return sum(gaps) / len(gaps)


def days_since(moment: datetime, now: datetime) -> int:
    elapsed = (_as_utc(now) - _as_utc(moment)).total_seconds()
    return max(int(elapsed // SECONDS_PER_DAY), 0)


def build_factors(
    lead: LeadRecord,
    activities: List[ActivityRecord],
    now: datetime
) -> ScoringFactors:
    """
    Derive scoring factors from already-fetched records.

    Args:
        lead: Lead record (campaign attached when the lead has one)
        activities: Lead activities, newest first
        now: Reference time for recency

    Returns:
        ScoringFactors for the lead
    """
    emails = [a for a in activities if a.type == ActivityType.EMAIL.value]
    calls = [a for a in activities if a.type == ActivityType.CALL.value]

    if activities:
        newest = max(activities, key=lambda a: _as_utc(a.created_at))
        last_activity_days = days_since(newest.created_at, now)
    else:
        last_activity_days = days_since(lead.created_at, now)

    campaign_name = lead.campaign.name if lead.campaign else None
    source = lead.custom_data.get("source")

    return ScoringFactors(
        has_email=lead.contact.has("email"),
        has_phone=lead.contact.has("phone"),
        has_job_title=lead.contact.has("job_title"),
        has_company=lead.contact.has("company"),
        custom_data_completeness=custom_data_completeness(lead.custom_data),
        email_opens=sum(1 for a in emails if a.metadata.opened_flag()),
        email_clicks=sum(1 for a in emails if a.metadata.clicked_flag()),
        calls_answered=sum(1 for a in calls if a.metadata.answered_flag()),
        calls_attempted=len(calls),
        response_time_hours=mean_response_time_hours(activities),
        last_activity_days=last_activity_days,
        total_activities=len(activities),
        campaign_type=campaign_name or DEFAULT_CAMPAIGN_TYPE,
        lead_source=str(source) if source else DEFAULT_LEAD_SOURCE
    )


class FactorExtractor:
    """Fetches a lead's records and turns them into ScoringFactors"""

    def __init__(
        self,
        lead_store: LeadStore,
        activity_store: ActivityStore,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.lead_store = lead_store
        self.activity_store = activity_store
        self.clock = clock or utc_now

    async def extract(self, lead_id: str) -> ScoringFactors:
        """
        Build scoring factors for one lead.

        Raises:
            LeadNotFoundError: If the lead id does not resolve
        """
        lead = await self.lead_store.get_lead(lead_id)
        if lead is None:
            raise LeadNotFoundError(lead_id)

        activities = await self.activity_store.list_activities(lead_id)
        factors = build_factors(lead, activities, self.clock())

        logger.debug(
            f"Extracted factors for lead {lead_id}: "
            f"activities={factors.total_activities}, last_activity_days={factors.last_activity_days}"
        )
        return factors
