import os
from datetime import date
from typing import AsyncGenerator, BinaryIO, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Set test environment before importing the application
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ.setdefault("PRS_ONLINE_LOG_LEVEL", "WARNING")
os.environ.setdefault("LOGFIRE_ENABLED", "false")

from prs_online.core.database import create_all, create_sessionmaker  # noqa: E402
from prs_online.core.database.entities import (  # noqa: E402
    Firm,
    PracticeReview,
    Profile,
    UpcomingReviewNotice,
    User,
)
from prs_online.core.models import NoticeState, UserRole  # noqa: E402
from prs_online.core.security import TokenClaims, create_access_token, hash_password  # noqa: E402
from prs_online.server.core.config import AuthConfig, Settings  # noqa: E402
from prs_online.server.services.email import EmailSender  # noqa: E402

TEST_PASSWORD = "secret-password"


class FakeRedis:
    """In-memory stand-in for ``redis.asyncio.Redis`` (string commands only)."""

    def __init__(self) -> None:
        self.store: Dict[str, str] = {}
        self.ttls: Dict[str, Optional[int]] = {}

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self.store[key] = value
        self.ttls[key] = ex
        return True

    async def get(self, key: str) -> Optional[str]:
        return self.store.get(key)

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed


class MemoryStorage:
    """Object storage keeping uploads in a dict."""

    base_url = "https://storage.test/profile-pictures"

    def __init__(self) -> None:
        self.objects: Dict[str, Tuple[bytes, Optional[str]]] = {}
        self.streams: List[BinaryIO] = []

    async def upload(self, object_name: str, stream: BinaryIO, *, content_type: Optional[str] = None) -> str:
        self.streams.append(stream)
        self.objects[object_name] = (stream.read(), content_type)
        return f"{self.base_url}/{object_name}"


@pytest.fixture
def test_settings() -> Settings:
    """Application settings with a cheap bcrypt cost."""
    return Settings(_env_file=None, auth=AuthConfig(bcrypt_rounds=4, jwt_secret="test-secret"))


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest.fixture
def redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def mailer() -> AsyncMock:
    return AsyncMock(spec=EmailSender)


@pytest.fixture
def create_user(session: AsyncSession):
    """Factory persisting a user (and optionally a profile)."""

    async def _create(
        username: str = "jdoe",
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        role_id: int = UserRole.user.value,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        country: Optional[str] = None,
    ) -> User:
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            password=hash_password(password, rounds=4),
            role_id=role_id,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        if first_name or last_name or country:
            session.add(Profile(user_id=user.id, first_name=first_name, last_name=last_name, country=country))
            await session.commit()
        return user

    return _create


@pytest.fixture
def create_notice(session: AsyncSession):
    """Factory persisting a firm, a practice review and its upcoming review notice."""
    counter = {"n": 0}

    async def _create(
        start_date: date,
        *,
        contact_email: Optional[str] = "contact@firm.test",
        stage: NoticeState = NoticeState.pending_generation,
        is_generated: bool = False,
        is_reviewed_at_generate_stage: bool = False,
        is_reviewed_at_approval_stage: bool = False,
        has_increased_risk: bool = False,
        firm_name: str = "Smith & Co",
    ) -> UpcomingReviewNotice:
        counter["n"] += 1
        firm = Firm(name=firm_name, firm_number=f"F{counter['n']:04d}")
        session.add(firm)
        await session.commit()
        await session.refresh(firm)

        review = PracticeReview(
            pr_number=f"PR-{counter['n']:04d}",
            firm_id=firm.id,
            start_date=start_date,
            contact_name="Jane Smith",
            contact_email=contact_email,
            has_increased_risk=has_increased_risk,
        )
        session.add(review)
        await session.commit()
        await session.refresh(review)

        notice = UpcomingReviewNotice(
            practice_review_id=review.id,
            stage=stage.value,
            is_generated=is_generated,
            is_reviewed_at_generate_stage=is_reviewed_at_generate_stage,
            is_reviewed_at_approval_stage=is_reviewed_at_approval_stage,
        )
        session.add(notice)
        await session.commit()
        await session.refresh(notice)
        return notice

    return _create


@pytest.fixture
def auth_headers(test_settings: Settings):
    """Build an ``Authorization`` header for a persisted user."""

    def _headers(user: User) -> Dict[str, str]:
        claims = TokenClaims(user_id=user.id, username=user.username, role=user.role_id, email=user.email)
        token = create_access_token(claims, test_settings.auth.jwt_secret)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session: AsyncSession, redis: FakeRedis, storage: MemoryStorage, mailer: AsyncMock, test_settings: Settings
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with overridden dependencies."""
    from prs_online.core.database import get_session
    from prs_online.server.main import app
    from prs_online.server.services.deps import get_email_sender, get_redis, get_settings, get_storage

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_redis] = lambda: redis
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_email_sender] = lambda: mailer
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def graphql(client: AsyncClient):
    """Post a GraphQL operation and return the decoded body."""

    async def _execute(query: str, variables: Optional[dict] = None, headers: Optional[Dict[str, str]] = None) -> dict:
        response = await client.post("/graphql", json={"query": query, "variables": variables or {}}, headers=headers)
        assert response.status_code == 200, response.text
        return response.json()

    return _execute
