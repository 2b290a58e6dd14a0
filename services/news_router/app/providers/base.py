"""
Provider adapter contract.

Every adapter wraps one third-party news API and maps its JSON into
``NormalizedArticle``. Adapters never raise: a missing key, a non-2xx status,
an unreadable body or a transport error all come back as
``ProviderUnavailable`` with the reason, and the failure is logged.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx

from shared.app_logging.logger import get_logger
from shared.schemas.articles import NormalizedArticle

logger = get_logger("news_router.providers")


@dataclass(frozen=True)
class ProviderOk:
    articles: List[NormalizedArticle] = field(default_factory=list)


@dataclass(frozen=True)
class ProviderUnavailable:
    reason: str

    @property
    def articles(self) -> List[NormalizedArticle]:
        return []


ProviderResult = Union[ProviderOk, ProviderUnavailable]


class NewsProvider(ABC):
    name: str = "provider"

    def __init__(self, client: httpx.AsyncClient, api_key: str, query_terms: str):
        self.client = client
        self.api_key = api_key or ""
        self.query_terms = query_terms

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @abstractmethod
    def build_request(
        self, country: str, limit: int, query: Optional[str], page: int
    ) -> Tuple[str, Dict[str, Any]]:
        """Return the endpoint URL and query parameters for one GET."""

    @abstractmethod
    def normalize(self, payload: Any, country: str, limit: int) -> List[NormalizedArticle]:
        """Map the provider's JSON body to normalized articles."""

    async def fetch(
        self, country: str, limit: int, query: Optional[str] = None, page: int = 1
    ) -> ProviderResult:
        if not self.configured:
            logger.debug(f"{self.name}: no API key configured, skipping")
            return ProviderUnavailable("missing credentials")

        try:
            url, params = self.build_request(country, limit, query, page)
            response = await self.client.get(url, params=params)
            if response.is_error:
                logger.warning(f"{self.name}: HTTP {response.status_code} for country={country}")
                return ProviderUnavailable(f"HTTP {response.status_code}")
            articles = self.normalize(response.json(), country, limit)
        except Exception as e:
            logger.error(f"{self.name}: fetch failed for country={country}: {e}")
            return ProviderUnavailable(f"{type(e).__name__}: {e}")

        logger.info(f"{self.name}: {len(articles)} articles for country={country}")
        return ProviderOk(articles)
