"""Shared fixtures: per-test SQLite database, local blob store, HTTP client."""

import os
import tempfile

_TMP = tempfile.mkdtemp(prefix='filevault-tests-')
os.environ.setdefault('DATABASE_URL', f'sqlite+aiosqlite:///{_TMP}/unused.db')
os.environ.setdefault('SECRET_KEY', 'test-secret-key')
os.environ.setdefault('FILE_STORAGE_PATH', os.path.join(_TMP, 'uploads'))

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402

import filevault.models.file  # noqa: E402, F401
import filevault.models.user  # noqa: E402, F401
from filevault.core.deps import get_blob_store  # noqa: E402
from filevault.database import Base, get_async_session  # noqa: E402
from filevault.main import app  # noqa: E402
from filevault.repositories.files import FileRecordStore  # noqa: E402
from filevault.repositories.users import UserStore  # noqa: E402
from filevault.services.files import FileService  # noqa: E402
from filevault.services.users import UserService  # noqa: E402
from filevault.storage.local import LocalBlobStore  # noqa: E402


class FakeClock:
    """Settable clock for expiry tests."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
async def engine(tmp_path):
    """Fresh SQLite database with all tables.

    Yields:
        Async engine bound to a file in tmp_path.
    """
    engine = create_async_engine(f'sqlite+aiosqlite:///{tmp_path / "test.db"}')
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def blob_store(tmp_path):
    """Local blob store rooted in a not-yet-existing directory."""
    return LocalBlobStore(tmp_path / 'uploads')


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def record_store(session):
    return FileRecordStore(session)


@pytest.fixture
def file_service(record_store, blob_store, clock):
    return FileService(record_store, blob_store, clock=clock)


@pytest.fixture
def user_service(session):
    return UserService(UserStore(session))


@pytest.fixture
async def alice(user_service):
    return await user_service.register('alice', 'alice@x.com', 'pw123456')


@pytest.fixture
async def bob(user_service):
    return await user_service.register('bob', 'bob@y.com', 'pw654321')


@pytest.fixture
async def client(session_maker, blob_store):
    """HTTP client against the app with test database and storage.

    Yields:
        httpx AsyncClient talking to the ASGI app in-process.
    """
    async def override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as client:
        yield client

    app.dependency_overrides.clear()
