import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")
os.environ.setdefault("ADMIN_EMAILS", "admin@caminho.test")

from datetime import date

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.cache import RedisCache
from app.core.database import Base, get_db
from app.core.redis_lifecyle import get_cache
from app.core.security import create_identity_token
from app.models.profile.pilgrim_profile import PilgrimProfile, VerificationStatus
from app.services.profile.profile_service import ProfileService
from app.main import app

ADMIN_EMAIL = "admin@caminho.test"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def cache():
    redis_client = FakeAsyncRedis(decode_responses=True)
    yield RedisCache(redis_client)
    await redis_client.flushall()
    await redis_client.aclose()


@pytest_asyncio.fixture
async def client(session_factory, cache):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_cache():
        yield cache

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = override_get_cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def headers_for():
    def _headers(user_id: str, **claims) -> dict:
        return {"Authorization": f"Bearer {create_identity_token(user_id, **claims)}"}
    return _headers


@pytest.fixture
def admin_headers(headers_for):
    return headers_for("admin-1", email=ADMIN_EMAIL, first_name="Ana", last_name="Admin")


@pytest.fixture
def activity_payload():
    def _payload(**overrides) -> dict:
        payload = {
            "title": "Dinner in Porto",
            "description": "Francesinha at the riverside",
            "type": "meal",
            "city": "Porto",
            "date": date.today().isoformat(),
            "time": "20:00",
            "spots": 4,
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.fixture
def save_profile(client, headers_for):
    async def _save(user_id: str, display_name: str, **fields):
        body = {"display_name": display_name, **fields}
        response = await client.post("/api/profile", json=body, headers=headers_for(user_id))
        assert response.status_code == 200, response.text
        return response.json()
    return _save


@pytest.fixture
def create_activity(client, headers_for, activity_payload):
    async def _create(creator_id: str, **overrides):
        response = await client.post(
            "/api/activities", json=activity_payload(**overrides), headers=headers_for(creator_id)
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def verify_user(session_factory):
    """Mark user_id as verified, creating a bare profile when none exists."""
    async def _verify(user_id: str, display_name: str = "Peregrino"):
        async with session_factory() as session:
            profile = await ProfileService.get_profile(session, user_id)
            if profile is None:
                profile = PilgrimProfile(user_id=user_id, display_name=display_name, cities=[])
                session.add(profile)
            profile.verification_status = VerificationStatus.verified
            await session.commit()
    return _verify
