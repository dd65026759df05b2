"""
Database models for the lead scoring engine
"""
from .database import Base, engine, SessionLocal
from .campaign import Campaign
from .lead import Lead
from .activity import Activity, ActivityType

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "Campaign",
    "Lead",
    "Activity",
    "ActivityType",
]
