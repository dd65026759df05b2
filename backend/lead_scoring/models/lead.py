"""
Lead model for storing sales leads and their scoring snapshot
"""
import uuid

from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .database import Base


class Lead(Base):
    """
    Lead model representing a sales prospect.

    `standard_data` holds the structured contact fields (email, phone,
    jobTitle, company, ...). `custom_data` is the free-form key/value bag;
    the latest scoring snapshot is merged into it.
    """
    __tablename__ = "leads"

    __table_args__ = (
        Index('idx_leads_campaign_created', 'campaign_id', 'created_at'),
    )

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="SET NULL"), index=True)

    standard_data = Column(JSON, default=dict)
    custom_data = Column(JSON, default=dict)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    campaign = relationship("Campaign", back_populates="leads")
    activities = relationship(
        "Activity",
        back_populates="lead",
        cascade="all, delete-orphan",
        order_by="desc(Activity.created_at)"
    )

    def __repr__(self):
        return f"<Lead(id={self.id}, campaign_id={self.campaign_id})>"
