from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

from services.news_router.app.aggregator import Aggregator, build_providers
from services.news_router.app.cache import InMemoryTTLCache, RedisTTLCache
from services.news_router.app.explainer import AIExplainer
from services.news_router.app.gate import parse_request
from services.news_router.app.persistence import ArticlePersister
from services.news_router.app.pipeline import NewsPipeline
from shared.app_logging.logger import CorrelationContext, setup_logging
from shared.config.settings import Settings, get_settings
from shared.database.session import SessionLocal, init_db
from shared.schemas.articles import ErrorResponse
from shared.utils.health import create_news_router_health_checker
from shared.utils.redis_client import close_all_redis_clients, get_redis_client

# Setup logging
logger = setup_logging("news_router")

settings = get_settings()

health_checker = create_news_router_health_checker()

REQUESTS = Counter("news_router_requests_total", "Ingestion requests handled", ["outcome"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type, x-country, x-bypass-cache",
}


def build_pipeline(settings: Settings, client: httpx.AsyncClient) -> NewsPipeline:
    if settings.news.cache_backend == "redis":
        cache = RedisTTLCache(get_redis_client("news_router"))
    else:
        cache = InMemoryTTLCache()

    return NewsPipeline(
        aggregator=Aggregator(build_providers(settings, client), page_size=settings.news.provider_page_size),
        persister=ArticlePersister(SessionLocal, settings.news.default_author_id),
        cache=cache,
        cache_ttl=settings.news.cache_ttl_seconds,
        brand=settings.news.brand,
        explainer=AIExplainer(settings.openai),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    client = httpx.AsyncClient(timeout=settings.service.http_timeout, follow_redirects=True)
    app.state.pipeline = build_pipeline(settings, client)
    logger.info(
        f"News router ready: providers={settings.providers.configured() or 'none'}, "
        f"cache={settings.news.cache_backend}, ai={'on' if settings.openai.api_key else 'off'}, "
        f"persistence={'on' if settings.news.default_author_id else 'off'}"
    )
    try:
        yield
    finally:
        await client.aclose()
        if app.state.pipeline.explainer.configured:
            await app.state.pipeline.explainer.client.close()
        close_all_redis_clients()
        logger.info("News router shut down cleanly")


app = FastAPI(title="TechBeetle News Router", lifespan=lifespan)


def get_pipeline(request: Request) -> NewsPipeline:
    return request.app.state.pipeline


@app.get("/news-router/health")
def health():
    """Comprehensive health check endpoint."""
    return health_checker.run_all_checks()


@app.get("/news-router/health/live")
def liveness_check():
    """Liveness check endpoint."""
    return {"status": "alive", "service": "news_router"}


@app.get("/news-router/health/ready")
def readiness_check():
    """Readiness check endpoint."""
    health_data = health_checker.run_all_checks()
    critical_checks = [check for check in health_data["checks"] if check["name"] in ["database", "redis"]]
    all_critical_healthy = all(check["status"] == "healthy" for check in critical_checks)

    return {
        "status": "ready" if all_critical_healthy else "not_ready",
        "service": "news_router",
        "critical_dependencies": {check["name"]: check["status"] for check in critical_checks},
    }


@app.get("/news-router/metrics")
def metrics():
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.options("/news-router")
def preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@app.post("/news-router")
async def news_router(request: Request, pipeline: NewsPipeline = Depends(get_pipeline)):
    """Aggregate, normalize, persist and return technology news for one country."""
    with CorrelationContext(request.headers.get("x-request-id")):
        try:
            ingestion = parse_request(await request.body(), request.headers, request.query_params, settings.news)
            logger.info(
                f"Ingestion request country={ingestion.country} limit={ingestion.target_count} "
                f"bypass_cache={ingestion.bypass_cache} query={ingestion.query!r}"
            )
            payload = await pipeline.run(ingestion)
        except Exception as e:
            logger.exception("news-router error: %s", e)
            REQUESTS.labels(outcome="error").inc()
            return JSONResponse(ErrorResponse(error=str(e)).model_dump(), status_code=500, headers=CORS_HEADERS)

        REQUESTS.labels(outcome="ok").inc()
        return JSONResponse(payload, headers=CORS_HEADERS)
