"""Service test fixtures — async DB, FastAPI test client, seeded shelter data.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so readiness probes hit the test engine
    - get_outbox overridden with an outbox over a recording fake sender (no SMTP)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - `world` seeds the canonical scenario: G1 with U1 (member), U2 (group admin),
      animal A1 with C1 (t=10, system tag), C2 (t=20), update D1 (t=15); U3 belongs
      nowhere; G2 owns a skill tag G1 must not accept
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

import shelterhub.infrastructure.database as db_module
from shelterhub.api.dependencies import get_outbox
from shelterhub.core.domain_types import MembershipRole
from shelterhub.db.base import Base
from shelterhub.infrastructure.database import DatabaseSessionManager, get_db
from shelterhub.infrastructure.security import create_access_token
from shelterhub.main import app
from shelterhub.models import (
    Animal, AnimalComment, CommentTag, Group, Update, User, UserGroup, UserSkillTag,
)
from shelterhub.services.announcement_outbox import AnnouncementOutbox

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    return BASE_TIME + timedelta(minutes=minutes)


@dataclass
class FakeEmailSender:
    """Records sends; addresses in `failing` raise."""
    configured: bool = True
    failing: set[str] = field(default_factory=set)
    sent: list[tuple[str, str, str]] = field(default_factory=list)

    def is_configured(self) -> bool:
        return self.configured

    def send_announcement_email(self, address: str, title: str, body: str) -> None:
        if address in self.failing:
            raise RuntimeError(f"mailbox unavailable: {address}")
        self.sent.append((address, title, body))


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
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def fresh_db(test_session_factory):
    """A second session: reads only what other sessions committed."""
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def fake_sender():
    return FakeEmailSender()


@pytest.fixture
def outbox(fake_sender):
    return AnnouncementOutbox(fake_sender, max_concurrency=2)


@pytest.fixture
async def client(test_engine, test_session_factory, outbox):
    """FastAPI test client with DB and outbox dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_outbox] = lambda: outbox

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


def _bearer(user: User, is_admin: bool = False) -> dict[str, str]:
    token = create_access_token(user.id, is_admin=is_admin)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    """Build Authorization headers for a seeded user."""
    return _bearer


@pytest.fixture
async def world(test_db):
    """Seed the canonical two-group scenario and return handles to every row."""
    db = test_db
    u1 = User(username="u1", email="u1@example.org", email_notifications_enabled=True,
              created_at=at(1))
    u2 = User(username="u2", email="u2@example.org", created_at=at(2))
    u3 = User(username="u3", email="u3@example.org", email_notifications_enabled=True,
              created_at=at(3))
    root = User(username="root", email="root@example.org", is_admin=True, created_at=at(0))
    g1 = Group(name="Downtown Shelter", created_at=at(0))
    g2 = Group(name="Eastside Foster", created_at=at(0))
    db.add_all([u1, u2, u3, root, g1, g2])
    await db.flush()

    db.add_all([
        UserGroup(user_id=u1.id, group_id=g1.id, role=MembershipRole.MEMBER.value),
        UserGroup(user_id=u2.id, group_id=g1.id, role=MembershipRole.ADMIN.value),
    ])
    a1 = Animal(group_id=g1.id, name="Biscuit", created_at=at(0))
    sys1 = CommentTag(group_id=g1.id, name="Medical", is_system=True)
    plain = CommentTag(group_id=g1.id, name="Walk")
    tag_a = UserSkillTag(group_id=g1.id, name="Dog handling", color="#22c55e")
    tag_a2 = UserSkillTag(group_id=g1.id, name="Photography", color="#3b82f6")
    tag_b = UserSkillTag(group_id=g2.id, name="Driving", color="#f59e0b")
    db.add_all([a1, sys1, plain, tag_a, tag_a2, tag_b])
    await db.flush()

    c1 = AnimalComment(animal_id=a1.id, user_id=u1.id, content="Limping on left paw",
                       created_at=at(10), tags=[sys1])
    c2 = AnimalComment(animal_id=a1.id, user_id=u2.id, content="Great walk today",
                       created_at=at(20), tags=[plain])
    d1 = Update(group_id=g1.id, user_id=u2.id, title="Volunteer day",
                content="Saturday cleanup starts at nine", created_at=at(15))
    db.add_all([c1, c2, d1])
    await db.commit()

    return SimpleNamespace(
        u1=u1, u2=u2, u3=u3, root=root, g1=g1, g2=g2, a1=a1,
        sys1=sys1, plain=plain, tag_a=tag_a, tag_a2=tag_a2, tag_b=tag_b,
        c1=c1, c2=c2, d1=d1,
    )
