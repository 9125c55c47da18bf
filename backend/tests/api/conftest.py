"""API test fixtures — async DB, FastAPI test client, token minting.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test session factory
    - db_manager patched so the readiness probe sees the test engine
    - Tokens are signed with the same secret the app reads from the environment

Design Decisions:
    - SQLite in-memory: fast, no external dependency; FOR UPDATE is a no-op there
    - seed_opportunity writes through the ORM directly so tests control created_at/created_by
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
import app.infrastructure.database as db_module
from app.models.opportunity import Opportunity
from app.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def make_token(jwt_secret):
    """Mint an HS256 token. claim_key picks which id claim carries the user id."""
    def _make(
        user_id: str | None = "user-1",
        claim_key: str = "user_id",
        expires_in: int | None = 3600,
        secret: str | None = None,
        **claims,
    ) -> str:
        payload = dict(claims)
        if user_id is not None:
            payload[claim_key] = user_id
        if expires_in is not None:
            payload["exp"] = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        return jwt.encode(payload, secret or jwt_secret, algorithm="HS256")
    return _make


@pytest.fixture
def auth_headers(make_token):
    def _headers(user_id: str = "user-1") -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id)}"}
    return _headers


@pytest.fixture
def seed_opportunity(test_session_factory):
    """Insert an opportunity directly; keyword overrides map to ORM attributes."""
    async def _seed(**overrides) -> Opportunity:
        fields = {
            "title": "Summer Internship",
            "description": "Backend engineering internship",
            "category": "INTERNSHIP",
            "created_by": "owner-1",
        }
        fields.update(overrides)
        tags = fields.pop("tags", [])
        async with test_session_factory() as session:
            record = Opportunity(**fields)
            record.replace_tags(tags)
            session.add(record)
            await session.commit()
            return record
    return _seed
