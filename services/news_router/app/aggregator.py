from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import httpx
from prometheus_client import Counter

from services.news_router.app.providers.base import NewsProvider, ProviderUnavailable
from services.news_router.app.providers.gnews import GNewsProvider
from services.news_router.app.providers.guardian import GuardianProvider
from services.news_router.app.providers.mediastack import MediaStackProvider
from services.news_router.app.providers.newsdata import NewsDataProvider
from shared.app_logging.logger import get_logger
from shared.config.settings import Settings
from shared.schemas.articles import NormalizedArticle

logger = get_logger("news_router.aggregator")

PROVIDER_UNAVAILABLE = Counter(
    "news_router_provider_unavailable_total",
    "Provider calls that contributed nothing because the provider was unavailable",
    ["provider"],
)


@dataclass
class CollectReport:
    articles: List[NormalizedArticle] = field(default_factory=list)
    unavailable: Dict[str, str] = field(default_factory=dict)

    @property
    def degraded_count(self) -> int:
        return len(self.unavailable)


class Aggregator:
    """Runs providers one after another until enough articles are collected."""

    def __init__(self, providers: Sequence[NewsProvider], page_size: int = 10):
        self.providers = list(providers)
        self.page_size = page_size

    async def collect_with_report(
        self, country: str, target_count: int, query: Optional[str] = None, page: int = 1
    ) -> CollectReport:
        report = CollectReport()
        for provider in self.providers:
            try:
                result = await provider.fetch(country, self.page_size, query, page)
            except Exception as e:
                logger.error(f"Provider {provider.name} raised: {e}")
                result = ProviderUnavailable(f"{type(e).__name__}: {e}")

            if isinstance(result, ProviderUnavailable):
                report.unavailable[provider.name] = result.reason
                PROVIDER_UNAVAILABLE.labels(provider=provider.name).inc()

            report.articles.extend(result.articles)
            if len(report.articles) >= target_count:
                break

        if report.unavailable:
            logger.info(
                f"Collected {len(report.articles)} articles for {country}; "
                f"{report.degraded_count} provider(s) unavailable: {sorted(report.unavailable)}"
            )
        return report

    async def collect(
        self, country: str, target_count: int, query: Optional[str] = None, page: int = 1
    ) -> List[NormalizedArticle]:
        report = await self.collect_with_report(country, target_count, query, page)
        return report.articles


def build_providers(settings: Settings, client: httpx.AsyncClient) -> List[NewsProvider]:
    """Providers in priority order: NewsData, GNews, MediaStack, Guardian."""
    keys = settings.providers
    terms = settings.news.query_terms
    return [
        NewsDataProvider(client, keys.newsdata_api_key, terms),
        GNewsProvider(client, keys.gnews_api_key, terms),
        MediaStackProvider(client, keys.mediastack_api_key, terms),
        GuardianProvider(client, keys.guardian_api_key, terms),
    ]
