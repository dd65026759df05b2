"""
Test doubles and record builders shared across the suite
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Set

from lead_scoring.core.exceptions import DatabaseError, LeadNotFoundError
from lead_scoring.schemas.scoring import (
    ActivityRecord,
    CampaignRecord,
    ContactData,
    LeadRecord,
)
from lead_scoring.services.lead_store import ActivityStore, LeadStore

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class InMemoryLeadStore(LeadStore, ActivityStore):
    """Dict-backed store with hooks to inject failures and latency."""

    def __init__(self):
        self.leads: Dict[str, LeadRecord] = {}
        self.activities: Dict[str, List[ActivityRecord]] = {}
        self.fail_get: Set[str] = set()
        self.fail_merge: Dict[str, int] = {}  # lead_id -> number of writes to fail
        self.delays: Dict[str, float] = {}
        self.merge_calls: List[str] = []
        self.active_reads = 0
        self.max_active_reads = 0

    def add_lead(
        self,
        lead_id: str,
        contact: Optional[dict] = None,
        custom_data: Optional[dict] = None,
        created_at: datetime = NOW - timedelta(days=60),
        campaign: Optional[CampaignRecord] = None,
        activities: Iterable[ActivityRecord] = ()
    ) -> LeadRecord:
        lead = LeadRecord(
            id=lead_id,
            contact=ContactData.model_validate(contact or {}),
            custom_data=custom_data or {},
            created_at=created_at,
            campaign_id=campaign.id if campaign else None,
            campaign=campaign
        )
        self.leads[lead_id] = lead
        self.activities[lead_id] = sorted(activities, key=lambda a: a.created_at, reverse=True)
        return lead

    async def get_lead(self, lead_id: str) -> Optional[LeadRecord]:
        self.active_reads += 1
        self.max_active_reads = max(self.max_active_reads, self.active_reads)
        try:
            if lead_id in self.delays:
                await asyncio.sleep(self.delays[lead_id])
            if lead_id in self.fail_get:
                raise RuntimeError(f"read failed for {lead_id}")
            lead = self.leads.get(lead_id)
            return lead.model_copy(deep=True) if lead else None
        finally:
            self.active_reads -= 1

    async def list_lead_ids(self, campaign_id: Optional[str] = None) -> List[str]:
        return [
            lead_id for lead_id, lead in self.leads.items()
            if campaign_id is None or lead.campaign_id == campaign_id
        ]

    async def merge_custom_data(self, lead_id: str, patch: dict) -> None:
        self.merge_calls.append(lead_id)
        if lead_id not in self.leads:
            raise LeadNotFoundError(lead_id)
        if self.fail_merge.get(lead_id, 0) > 0:
            self.fail_merge[lead_id] -= 1
            raise DatabaseError(f"write failed for {lead_id}")
        lead = self.leads[lead_id]
        lead.custom_data = {**lead.custom_data, **patch}

    async def list_activities(self, lead_id: str) -> List[ActivityRecord]:
        return list(self.activities.get(lead_id, []))


def activity(type_: str, days_ago: float = 0, hours_ago: float = 0, **metadata) -> ActivityRecord:
    """Build an activity relative to NOW."""
    return ActivityRecord(
        type=type_,
        created_at=NOW - timedelta(days=days_ago, hours=hours_ago),
        metadata=metadata
    )
