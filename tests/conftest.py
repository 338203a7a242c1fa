# tests/conftest.py
"""
Shared fixtures: a throwaway SQLite database per test, wired through the
same session factory the services use in production.
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, insert, select

from orgdir.core.config import Settings
from orgdir.db.models import Facility, Organization, Person, person_facilities
from orgdir.db.session_factory import DatabaseSessionFactory
from orgdir.services import PersonAggregateOrchestrator, PersonReadComposer


# Make anyio run on asyncio (so our async fixtures work everywhere)
@pytest.fixture(scope="session", autouse=True)
def anyio_backend():
    return "asyncio"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'orgdir.db'}",
        TESTING=True,
        DB_POOL_PRE_PING=False,
    )


@pytest.fixture
async def session_factory(test_settings):
    factory = DatabaseSessionFactory.from_settings(test_settings)
    await factory.create_schema()
    try:
        yield factory
    finally:
        await factory.shutdown()


@pytest.fixture
def orchestrator(session_factory, test_settings) -> PersonAggregateOrchestrator:
    return PersonAggregateOrchestrator(session_factory, settings=test_settings)


@pytest.fixture
def reader(session_factory) -> PersonReadComposer:
    return PersonReadComposer(session_factory)


@pytest.fixture
def count_rows(session_factory):
    """Return an async callable counting committed rows of a model."""

    async def _count(model) -> int:
        async with session_factory.read() as repos:
            result = await repos.session.execute(select(func.count()).select_from(model))
            return result.scalar_one()

    return _count


@pytest.fixture
def affiliate(session_factory):
    """Seed an organization with two facilities and attach a person to them."""

    async def _affiliate(person_id: str) -> dict:
        async with session_factory.transaction("seed_affiliations") as repos:
            session = repos.session
            await session.execute(
                insert(Organization).values(id="org-1", name="Springfield District", id_number="D-100")
            )
            await session.execute(
                insert(Facility).values(
                    [
                        {"id": "fac-a", "name": "North High", "id_number": "F-1", "organization_id": "org-1"},
                        {"id": "fac-b", "name": "South Elementary", "id_number": "F-2", "organization_id": "org-1"},
                    ]
                )
            )
            await session.execute(
                insert(person_facilities).values(
                    [
                        {"person_id": person_id, "facility_id": "fac-b"},
                        {"person_id": person_id, "facility_id": "fac-a"},
                    ]
                )
            )
            await session.execute(
                Person.__table__.update()
                .where(Person.__table__.c.id == person_id)
                .values(organization_id="org-1")
            )
        return {"organization_id": "org-1", "facility_ids": ["fac-a", "fac-b"]}

    return _affiliate
