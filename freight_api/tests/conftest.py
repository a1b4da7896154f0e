import os

# Settings are read at import time by src.api.main; pin test values first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BLOB_STORE_BACKEND"] = "memory"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"

import httpx
import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from src.db import models  # noqa: F401
from src.db.base import Base
from src.db.models.loads import Load, Receipt
from src.db.session import make_session_maker
from src.repositories.loads import LoadRepository
from src.storage.blob_store import InMemoryBlobStore

REF = "ab12ab12-0000-4fff-8fff-abcdefabcdef"
OTHER_REF = "a1b2c3d4-e5f6-0718-293a-4b5c6d7e8f90"

LOAD_FIELDS = {
    "current_location": "Lagos",
    "destination_location": "Abuja",
    "weight": 12.5,
    "weight_unit": "ton",
    "truck_length": 40,
    "length_unit": "ft",
    "contact_number": "+2348000000001",
    "staff_contact_number": "+2348000000002",
}


class RecordingBlobStore(InMemoryBlobStore):
    """In-memory store that records delete attempts and can be told to fail them."""

    def __init__(self, fail_delete: bool = False) -> None:
        super().__init__()
        self.fail_delete = fail_delete
        self.delete_calls = []

    async def delete(self, reference):
        self.delete_calls.append(reference)
        if self.fail_delete:
            raise RuntimeError("object store unavailable")
        return await super().delete(reference)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    maker = make_session_maker(engine)
    async with maker() as session:
        yield session


@pytest.fixture
def blob_store():
    return RecordingBlobStore()


@pytest.fixture
def failures():
    """Collects StorageOperationFailed objects passed to the failure hook."""
    return []


@pytest.fixture
def make_load(session):
    repo = LoadRepository(session)

    async def _make(**overrides):
        load = await repo.create_load(**{**LOAD_FIELDS, **overrides})
        await session.commit()
        return load

    return _make


async def all_loads(session):
    res = await session.execute(select(Load).execution_options(populate_existing=True))
    return list(res.scalars())


async def all_receipts(session):
    res = await session.execute(select(Receipt).execution_options(populate_existing=True))
    return list(res.scalars())


@pytest.fixture
async def client(engine, blob_store):
    from src.api.main import app
    from src.core.deps import get_blob_store
    from src.db.session import get_async_session

    maker = make_session_maker(engine)

    async def _session():
        async with maker() as s:
            yield s

    app.dependency_overrides[get_async_session] = _session
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
