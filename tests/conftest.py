"""Pytest configuration and shared fixtures.

Every test runs against the in-memory reading store with a pinned clock.
"""

import os

os.environ.setdefault("READING_STORE", "memory")
os.environ.setdefault("RATE_LIMIT_CALLS", "100000")

from collections.abc import Generator
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_clock, get_reading_store
from app.api.v1.endpoints.auth import get_current_user
from app.core.clock import Clock
from app.models.article import Article, ArticleCategory, BlockType, ContentBlock
from app.models.user import User, UserRole
from app.services.stores.memory_store import InMemoryReadingStore


NOW = datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)

TEACHER_ID = "teacher-1"
OTHER_TEACHER_ID = "teacher-2"
STUDENT_1 = "student-1"
STUDENT_2 = "student-2"


class FixedClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


def make_article(
    article_id: str,
    title: str,
    category: ArticleCategory = ArticleCategory.science,
    owner: str = TEACHER_ID,
) -> Article:
    return Article(
        id=article_id,
        title=title,
        category=category,
        content_blocks=[ContentBlock(type=BlockType.text, content="Body", order=0)],
        created_by=owner,
    )


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to NOW."""
    return FixedClock(NOW)


@pytest.fixture
def store() -> InMemoryReadingStore:
    """Store seeded with two teachers and two students, no articles."""
    store = InMemoryReadingStore()
    store.add_user(User(id=TEACHER_ID, name="Tess Teacher", email="tess@school.test", role=UserRole.teacher))
    store.add_user(User(id=OTHER_TEACHER_ID, name="Oscar Other", email="oscar@school.test", role=UserRole.teacher))
    store.add_user(User(id=STUDENT_1, name="Sam Student", email="sam@school.test"))
    store.add_user(User(id=STUDENT_2, name="Alex Student", email="alex@school.test"))
    return store


@pytest.fixture
def client(store: InMemoryReadingStore, clock: FixedClock) -> Generator[TestClient, None, None]:
    """API client acting as TEACHER_ID; call `client.act_as(user_id)` to switch."""
    from main import app

    identity = {"user_id": TEACHER_ID}
    app.dependency_overrides[get_reading_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_current_user] = lambda: identity["user_id"]

    with TestClient(app) as test_client:
        test_client.act_as = lambda user_id: identity.update(user_id=user_id)
        yield test_client

    app.dependency_overrides.clear()
