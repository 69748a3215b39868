"""
Test fixtures.

Repository and service tests run against an in-memory SQLite database through
aiosqlite; the JSON columns fall back from JSONB to plain JSON there.
"""
import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import editorial_ledger.models  # noqa: F401  registers the tables
from editorial_ledger.database import make_session_factory
from editorial_ledger.services.campaign_service import CampaignService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_test_engine():
    return create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
async def engine():
    engine = make_test_engine()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    async with make_session_factory(engine)() as session:
        yield session


@pytest.fixture
def campaign_service(session):
    return CampaignService(session)


@pytest.fixture
async def campaign(campaign_service):
    """A freshly created campaign record."""
    return await campaign_service.create_campaign({
        "project_name": "Europe eSIM Launch",
        "owner_email": "editor@example.com",
        "channels": ["email", "social"],
        "metadata": {"region": "eu"},
    })
