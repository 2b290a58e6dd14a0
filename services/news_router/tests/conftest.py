from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from services.news_router.app.providers.base import ProviderOk
from shared.database.session import init_db
from shared.schemas.articles import NormalizedArticle


class FakeClock:
    """Drives both the cache's monotonic clock and the pipeline's wall clock."""

    def __init__(self):
        self.offset = 0.0
        self.start = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def monotonic(self) -> float:
        return 1000.0 + self.offset

    def now(self) -> datetime:
        return self.start + timedelta(seconds=self.offset)

    def advance(self, seconds: float) -> None:
        self.offset += seconds


class StubProvider:
    def __init__(self, name, articles=None, error=None):
        self.name = name
        self.articles = articles or []
        self.error = error
        self.calls = []
        self.pages = []

    async def fetch(self, country, limit, query=None, page=1):
        self.calls.append((country, limit, query))
        self.pages.append(page)
        if self.error:
            raise self.error
        return ProviderOk(list(self.articles))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_article():
    def _make(**overrides):
        data = {
            "id": "https://example.com/story",
            "title": "Apple unveils a new chip",
            "summary": "Apple announced a faster chip for its laptops.",
            "url": "https://example.com/story",
            "image": None,
            "published_at": "2024-01-01T10:00:00Z",
            "source_name": "Example Times",
            "source_country": "us",
            "provider": "newsdata",
            "content_raw": "Apple announced a faster chip for its laptops on Monday.",
        }
        data.update(overrides)
        return NormalizedArticle(**data)

    return _make


@pytest.fixture
def stub_provider():
    return StubProvider


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)
