"""
Shared fixtures: in-memory row store, settings, HTTP client, payloads.
"""
import os

# Set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_FORMAT"] = "console"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from mixintake.core.config import Settings
from mixintake.core.database import Base, build_session_factory
from mixintake.models import SheetRow  # noqa: F401  registers the table
from mixintake.services.row_store import SqlRowStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return build_session_factory(test_engine)


@pytest.fixture
def row_store(session_factory):
    return SqlRowStore(session_factory)


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
async def client(row_store, settings):
    from mixintake.api.deps import get_row_store
    from mixintake.core.config import get_settings
    from mixintake.main import app

    app.dependency_overrides[get_row_store] = lambda: row_store
    app.dependency_overrides[get_settings] = lambda: settings

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


class SubmissionFactory:
    """Builds valid intake payloads."""

    @staticmethod
    def client_fields(**kwargs):
        data = {
            "clientName": "Adeyemi Builders Ltd",
            "contactEmail": "site@adeyemi.ng",
            "phoneNumber": "08031234567",
            "organisationType": "Contractor",
            "contactPerson": "Tunde Adeyemi",
            "projectSite": "Akoka Hostel Block C",
            "crushDate": "2025-03-14",
            "concreteType": "Normal weight",
            "cementType": "CEM II 42.5R",
            "slump": 75,
            "ageDays": 28,
            "cubesCount": 3,
            "concreteGrade": "C25/30",
            "notes": "Cubes delivered by site engineer",
        }
        data.update(kwargs)
        return data

    @classmethod
    def kgm3(cls, **kwargs):
        data = cls.client_fields(
            inputMode="kgm3",
            cementKgm3=350,
            waterKgm3=175,
            fineKgm3=700,
            coarseKgm3=1100,
        )
        data.update(kwargs)
        return data

    @classmethod
    def ratio(cls, **kwargs):
        data = cls.client_fields(
            inputMode="ratio",
            ratioCement=1,
            ratioFine=2,
            ratioCoarse=4,
            waterCementRatio=0.45,
        )
        data.update(kwargs)
        return data


@pytest.fixture
def payloads():
    return SubmissionFactory
