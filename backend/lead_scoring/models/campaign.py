"""
Campaign model

Leads are imported into campaigns; the campaign name doubles as the
campaign type used by lead scoring ("premium", "enterprise", "standard", ...).
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from lead_scoring.models.database import Base


class Campaign(Base):
    """Outreach campaign owning a set of leads."""
    __tablename__ = "campaigns"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(1000))
    status = Column(String(50), default="ACTIVE", nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    leads = relationship("Lead", back_populates="campaign")

    def __repr__(self):
        return f"<Campaign(id={self.id}, name='{self.name}')>"
