"""
Tests for SQLAlchemyLeadStore against an in-memory SQLite database
"""
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lead_scoring.core.exceptions import DatabaseError, LeadNotFoundError, LeadScorePersistenceError
from lead_scoring.models import Activity, Base, Campaign, Lead
from lead_scoring.services.lead_scoring_service import LeadScoringService
from lead_scoring.services.lead_store import SQLAlchemyLeadStore
from tests.factories import NOW


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def seeded(session_factory):
    """Two campaigns, three leads, activities on one of them"""
    db = session_factory()
    db.add_all([
        Campaign(id="camp-ent", name="Enterprise"),
        Campaign(id="camp-basic", name="basic"),
    ])
    db.add_all([
        Lead(
            id="lead-1",
            campaign_id="camp-ent",
            standard_data={"email": "ana@acme.example", "jobTitle": "VP Sales"},
            custom_data={"source": "inbound", "industry": "Logistics"},
            created_at=NOW - timedelta(days=30)
        ),
        Lead(
            id="lead-2",
            campaign_id="camp-basic",
            standard_data={"phone": "+1-555-0101"},
            custom_data=None,
            created_at=NOW - timedelta(days=20)
        ),
        Lead(id="lead-3", standard_data={}, custom_data={}, created_at=NOW - timedelta(days=10)),
    ])
    db.add_all([
        Activity(lead_id="lead-1", type="EMAIL", activity_metadata={"opened": True},
                 created_at=NOW - timedelta(days=3)),
        Activity(lead_id="lead-1", type="CALL", activity_metadata={"answered": 1},
                 created_at=NOW - timedelta(days=1)),
        Activity(lead_id="lead-1", type="NOTE", activity_metadata=None,
                 created_at=NOW - timedelta(days=5)),
    ])
    db.commit()
    db.close()
    return session_factory


@pytest.mark.asyncio
class TestSQLAlchemyLeadStore:

    async def test_get_lead(self, seeded):
        lead = await SQLAlchemyLeadStore(seeded).get_lead("lead-1")

        assert lead.id == "lead-1"
        assert lead.contact.email == "ana@acme.example"
        assert lead.contact.job_title == "VP Sales"
        assert lead.contact.has("phone") is False
        assert lead.custom_data == {"source": "inbound", "industry": "Logistics"}
        assert lead.campaign.name == "Enterprise"

    async def test_get_lead_without_campaign_or_custom_data(self, seeded):
        store = SQLAlchemyLeadStore(seeded)

        lead = await store.get_lead("lead-3")
        assert lead.campaign is None

        lead = await store.get_lead("lead-2")
        assert lead.custom_data == {}

    async def test_get_missing_lead(self, seeded):
        assert await SQLAlchemyLeadStore(seeded).get_lead("nope") is None

    async def test_list_lead_ids(self, seeded):
        store = SQLAlchemyLeadStore(seeded)
        assert await store.list_lead_ids() == ["lead-1", "lead-2", "lead-3"]
        assert await store.list_lead_ids("camp-basic") == ["lead-2"]
        assert await store.list_lead_ids("camp-missing") == []

    async def test_list_activities_newest_first(self, seeded):
        activities = await SQLAlchemyLeadStore(seeded).list_activities("lead-1")

        assert [a.type for a in activities] == ["CALL", "EMAIL", "NOTE"]
        assert activities[0].metadata.answered_flag() is True
        assert activities[1].metadata.opened_flag() is True
        assert activities[2].metadata.opened_flag() is False

    async def test_merge_custom_data(self, seeded):
        store = SQLAlchemyLeadStore(seeded)
        await store.merge_custom_data("lead-1", {"leadScore": 70, "industry": "Retail"})

        lead = await store.get_lead("lead-1")
        assert lead.custom_data == {"source": "inbound", "industry": "Retail", "leadScore": 70}

    async def test_merge_into_null_custom_data(self, seeded):
        store = SQLAlchemyLeadStore(seeded)
        await store.merge_custom_data("lead-2", {"leadScore": 12})
        assert (await store.get_lead("lead-2")).custom_data == {"leadScore": 12}

    async def test_merge_missing_lead(self, seeded):
        with pytest.raises(LeadNotFoundError):
            await SQLAlchemyLeadStore(seeded).merge_custom_data("nope", {"leadScore": 1})

    async def test_read_failure_becomes_database_error(self):
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))
        store = SQLAlchemyLeadStore(lambda: session)

        with pytest.raises(DatabaseError):
            await store.list_lead_ids()
        session.close.assert_called_once()

    async def test_write_failure_rolls_back(self):
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = MagicMock(custom_data={})
        session.commit.side_effect = OperationalError("UPDATE", {}, Exception("disk full"))
        store = SQLAlchemyLeadStore(lambda: session)

        with pytest.raises(LeadScorePersistenceError):
            await store.merge_custom_data("lead-1", {"leadScore": 1})
        session.rollback.assert_called_once()
        session.close.assert_called_once()


@pytest.mark.asyncio
async def test_end_to_end_batch_over_database(seeded, clock):
    store = SQLAlchemyLeadStore(seeded)
    service = LeadScoringService(
        lead_store=store,
        activity_store=store,
        clock=clock,
        max_concurrency=1
    )

    result = await service.recalculate()

    assert sorted(result.succeeded) == ["lead-1", "lead-2", "lead-3"]
    assert result.failed == []

    lead = await store.get_lead("lead-1")
    snapshot = lead.custom_data
    assert snapshot["industry"] == "Logistics"
    assert snapshot["lastScored"] == NOW.isoformat()
    assert snapshot["nextBestAction"] == "Schedule follow-up call"
    assert 0 <= snapshot["leadScore"] <= 100
