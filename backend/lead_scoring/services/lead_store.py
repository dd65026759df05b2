"""
Lead Store - Read/write access to leads, activities and campaigns

The scoring engine only talks to the abstract `LeadStore` and
`ActivityStore` interfaces. `SQLAlchemyLeadStore` implements both over the
CRM tables. SQLAlchemy sessions are synchronous, so every call runs in a
worker thread with its own session.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lead_scoring.core.exceptions import DatabaseError, LeadNotFoundError, LeadScorePersistenceError
from lead_scoring.core.logging import setup_logging
from lead_scoring.models import Activity, Campaign, Lead
from lead_scoring.schemas.scoring import ActivityRecord, CampaignRecord, ContactData, LeadRecord

logger = setup_logging(__name__)


class LeadStore(ABC):
    """Lead persistence as required by the scoring engine."""

    @abstractmethod
    async def get_lead(self, lead_id: str) -> Optional[LeadRecord]:
        """Fetch one lead with its campaign, or None if it does not exist."""

    @abstractmethod
    async def list_lead_ids(self, campaign_id: Optional[str] = None) -> List[str]:
        """List lead ids, optionally restricted to one campaign."""

    @abstractmethod
    async def merge_custom_data(self, lead_id: str, patch: Dict[str, Any]) -> None:
        """
        Merge `patch` into the lead's custom data bag.

        Keys not present in `patch` are left untouched.

        Raises:
            LeadNotFoundError: If the lead no longer exists
        """


class ActivityStore(ABC):
    """Activity history as required by the scoring engine."""

    @abstractmethod
    async def list_activities(self, lead_id: str) -> List[ActivityRecord]:
        """All activities of a lead, newest first."""


class SQLAlchemyLeadStore(LeadStore, ActivityStore):
    """
    Lead and activity store backed by SQLAlchemy.

    Args:
        session_factory: Callable returning a new Session (e.g. SessionLocal)
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    async def get_lead(self, lead_id: str) -> Optional[LeadRecord]:
        return await asyncio.to_thread(self._get_lead, lead_id)

    async def list_lead_ids(self, campaign_id: Optional[str] = None) -> List[str]:
        return await asyncio.to_thread(self._list_lead_ids, campaign_id)

    async def merge_custom_data(self, lead_id: str, patch: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._merge_custom_data, lead_id, patch)

    async def list_activities(self, lead_id: str) -> List[ActivityRecord]:
        return await asyncio.to_thread(self._list_activities, lead_id)

    # ------------------------------------------------------------------
    # Blocking implementations
    # ------------------------------------------------------------------

    def _get_lead(self, lead_id: str) -> Optional[LeadRecord]:
        db = self.session_factory()
        try:
            lead = db.query(Lead).filter(Lead.id == lead_id).first()
            if lead is None:
                return None

            campaign = None
            if lead.campaign_id:
                row = db.query(Campaign).filter(Campaign.id == lead.campaign_id).first()
                if row is not None:
                    campaign = CampaignRecord(id=row.id, name=row.name)

            return LeadRecord(
                id=lead.id,
                contact=ContactData.model_validate(lead.standard_data or {}),
                custom_data=dict(lead.custom_data or {}),
                created_at=lead.created_at,
                campaign_id=lead.campaign_id,
                campaign=campaign
            )
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching lead {lead_id}: {e}")
            raise DatabaseError(f"Failed to fetch lead {lead_id}: {str(e)}", details={"lead_id": lead_id})
        finally:
            db.close()

    def _list_lead_ids(self, campaign_id: Optional[str]) -> List[str]:
        db = self.session_factory()
        try:
            query = db.query(Lead.id)
            if campaign_id:
                query = query.filter(Lead.campaign_id == campaign_id)
            return [row[0] for row in query.order_by(Lead.created_at).all()]
        except SQLAlchemyError as e:
            logger.error(f"Database error listing leads (campaign={campaign_id}): {e}")
            raise DatabaseError(f"Failed to list leads: {str(e)}", details={"campaign_id": campaign_id})
        finally:
            db.close()

    def _list_activities(self, lead_id: str) -> List[ActivityRecord]:
        db = self.session_factory()
        try:
            rows = (
                db.query(Activity)
                .filter(Activity.lead_id == lead_id)
                .order_by(Activity.created_at.desc())
                .all()
            )
            return [
                ActivityRecord(
                    type=row.type,
                    created_at=row.created_at,
                    metadata=row.activity_metadata
                )
                for row in rows
            ]
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching activities for lead {lead_id}: {e}")
            raise DatabaseError(f"Failed to fetch activities for lead {lead_id}: {str(e)}", details={"lead_id": lead_id})
        finally:
            db.close()

    def _merge_custom_data(self, lead_id: str, patch: Dict[str, Any]) -> None:
        db = self.session_factory()
        try:
            lead = db.query(Lead).filter(Lead.id == lead_id).first()
            if lead is None:
                raise LeadNotFoundError(lead_id)

            # Reassign so the JSON column is flagged dirty
            lead.custom_data = {**(lead.custom_data or {}), **patch}
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error persisting custom data for lead {lead_id}: {e}")
            raise LeadScorePersistenceError(lead_id, details={"error": str(e)})
        finally:
            db.close()
