"""Endpoint tests for the news router service."""
import pytest
from fastapi.testclient import TestClient

from services.news_router.app.aggregator import Aggregator
from services.news_router.app.cache import InMemoryTTLCache
from services.news_router.app.main import app, get_pipeline
from services.news_router.app.persistence import ArticlePersister
from services.news_router.app.pipeline import NewsPipeline


class ExplodingPipeline:
    async def run(self, request):
        raise RuntimeError("database unreachable")


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def stub_pipeline(clock, session_factory, make_article, stub_provider):
    return NewsPipeline(
        aggregator=Aggregator([stub_provider("newsdata", [make_article()])]),
        persister=ArticlePersister(session_factory, None),
        cache=InMemoryTTLCache(clock=clock.monotonic),
        cache_ttl=240,
        now=clock.now,
    )


def test_app_creation():
    """Test that FastAPI app can be created."""
    assert app is not None
    assert app.title == "TechBeetle News Router"


def test_post_returns_items_with_cors(client, stub_pipeline):
    app.dependency_overrides[get_pipeline] = lambda: stub_pipeline

    response = client.post("/news-router?country=GB&limit=5")

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    data = response.json()
    assert data["success"] is True
    assert data["country"] == "gb"
    assert data["count"] == 1
    item = data["items"][0]
    assert item["slug"] == "apple-unveils-a-new-chip"
    assert item["seo_title"].endswith("| TechBeetle Brief")
    assert item["takeaways"]
    assert data["generated_at"]


def test_post_accepts_json_body_and_headers(client, stub_pipeline):
    app.dependency_overrides[get_pipeline] = lambda: stub_pipeline

    first = client.post("/news-router", headers={"x-country": "in"}).json()
    cached = client.post("/news-router", headers={"x-country": "in"}).json()
    refreshed = client.post("/news-router", headers={"x-country": "in"}, json={"refresh": True}).json()

    assert first["country"] == "in"
    assert cached == first
    assert refreshed["country"] == "in"


def test_pipeline_failure_returns_500_with_cors(client):
    app.dependency_overrides[get_pipeline] = lambda: ExplodingPipeline()

    response = client.post("/news-router")

    assert response.status_code == 500
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.json() == {"success": False, "error": "database unreachable"}


def test_preflight(client):
    response = client.options("/news-router")

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]
    assert "x-bypass-cache" in response.headers["access-control-allow-headers"]


def test_no_credentials_end_to_end():
    with TestClient(app) as client:
        response = client.post("/news-router", json={"triggered_at": "2024-01-01T00:00:00Z"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["count"] == 0
    assert data["items"] == []


def test_liveness(client):
    response = client.get("/news-router/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "alive", "service": "news_router"}


def test_health_reports_provider_degradation(client):
    response = client.get("/news-router/health")

    assert response.status_code == 200
    checks = {check["name"]: check for check in response.json()["checks"]}
    assert checks["database"]["status"] == "healthy"
    assert checks["providers"]["status"] == "degraded"


def test_metrics_endpoint(client):
    client.get("/news-router/health/live")
    response = client.get("/news-router/metrics")

    assert response.status_code == 200
    assert "news_router_requests_total" in response.text
