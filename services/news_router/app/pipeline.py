from datetime import datetime, timezone
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from prometheus_client import Counter

from services.news_router.app.aggregator import Aggregator
from services.news_router.app.cache import ResponseCache
from services.news_router.app.dedupe import dedupe_articles, dedupe_slugs
from services.news_router.app.explainer import AIExplainer
from services.news_router.app.gate import IngestionRequest
from services.news_router.app.persistence import ArticlePersister, SideEffect, run_side_effects
from services.news_router.app.rewriter import rewrite_article
from services.news_router.app.utils import parse_timestamp
from shared.app_logging.logger import get_logger
from shared.schemas.articles import NormalizedArticle, NewsRouterResponse

logger = get_logger("news_router.pipeline")

CACHE_HITS = Counter("news_router_cache_hits_total", "Requests answered from the response cache")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def newest_first(articles: List[NormalizedArticle]) -> List[NormalizedArticle]:
    """Stable sort by publish time, undated or unparseable articles last."""
    dated, undated = [], []
    for article in articles:
        published = parse_timestamp(article.published_at)
        if published is None:
            undated.append(article)
        else:
            dated.append((published, article))

    # list.sort is stable with reverse=True too, so ties keep provider order
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [article for _, article in dated] + undated

class NewsPipeline:
    """request -> cache -> providers -> dedupe -> rewrite -> explain -> persist -> cache -> response."""

    def __init__(
        self,
        aggregator: Aggregator,
        persister: ArticlePersister,
        cache: ResponseCache,
        cache_ttl: float,
        brand: str = "TechBeetle",
        now: Callable[[], datetime] = _utcnow,
        explainer: Optional[AIExplainer] = None,
    ):
        self.aggregator = aggregator
        self.persister = persister
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.brand = brand
        self.now = now
        self.explainer = explainer

    async def run(self, request: IngestionRequest) -> Dict[str, Any]:
        if not request.bypass_cache:
            cached, found = self.cache.get(request.cache_key)
            if found:
                CACHE_HITS.inc()
                logger.info(f"Cache hit for {request.cache_key}")
                return cached

        report = await self.aggregator.collect_with_report(
            request.country, request.target_count, request.query, request.page
        )
        unique = dedupe_articles(report.articles)
        rewritten = [rewrite_article(article, self.brand) for article in newest_first(unique)]
        # same-titled stories from different sources share a slug; the first one wins
        items = dedupe_slugs(rewritten)[: request.target_count]
        if self.explainer is not None and self.explainer.configured:
            items = [await self.explainer.explain(item) for item in items]
        logger.info(
            f"Aggregated {len(report.articles)} articles for {request.country}, "
            f"{len(unique)} after dedupe, returning {len(items)}"
        )

        self.persister.persist(items, request.country)
        run_side_effects(
            [SideEffect("ingestion_logs", partial(self.persister.record_ingestion, request.country, len(items)))]
        )

        payload = NewsRouterResponse(
            country=request.country,
            count=len(items),
            items=items,
            generated_at=self.now().isoformat(),
        ).model_dump(mode="json")
        self.cache.put(request.cache_key, payload, self.cache_ttl)
        return payload
