"""
Activity model: timestamped interactions (calls, emails, notes, status changes)
"""
import uuid
from enum import Enum

from sqlalchemy import Column, String, Text, DateTime, JSON, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .database import Base


class ActivityType(str, Enum):
    """Activity type tags recorded by the CRM"""
    CALL = "CALL"
    EMAIL = "EMAIL"
    NOTE = "NOTE"
    MEETING = "MEETING"
    STATUS_CHANGE = "STATUS_CHANGE"


class Activity(Base):
    """
    Activity attached to a lead.

    The `metadata` column is an opaque bag; scoring only reads the
    `opened`, `clicked` and `answered` flags from it.
    """
    __tablename__ = "activities"

    __table_args__ = (
        Index('idx_activities_lead_created', 'lead_id', 'created_at'),
    )

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    lead_id = Column(String(36), ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False, index=True)  # Stored as plain text, unknown types tolerated
    description = Column(Text)
    # `metadata` is reserved on declarative classes
    activity_metadata = Column("metadata", JSON)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    lead = relationship("Lead", back_populates="activities")

    def __repr__(self):
        return f"<Activity(id={self.id}, lead_id={self.lead_id}, type='{self.type}')>"
