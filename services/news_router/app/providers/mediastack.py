from services.news_router.app.providers.base import NewsProvider
from services.news_router.app.utils import to_str_or_empty, to_str_or_none
from shared.schemas.articles import NormalizedArticle


class MediaStackProvider(NewsProvider):
    """mediastack live news, technology category. Free plans are HTTP only."""

    name = "mediastack"
    endpoint = "http://api.mediastack.com/v1/news"

    def build_request(self, country, limit, query, page):
        keywords = ",".join((query or self.query_terms).split())
        params = {
            "access_key": self.api_key,
            "categories": "technology",
            "countries": country,
            "languages": "en",
            "limit": limit,
            "offset": (max(page, 1) - 1) * limit,
            "keywords": keywords,
        }
        return self.endpoint, params

    @staticmethod
    def _country_code(value, default):
        code = to_str_or_empty(value).strip().lower()
        return code if len(code) == 2 and code.isalpha() else default

    def normalize(self, payload, country, limit):
        articles = []
        for item in (payload.get("data") or [])[:limit]:
            if not isinstance(item, dict):
                continue
            link = to_str_or_empty(item.get("url"))
            articles.append(
                NormalizedArticle(
                    id=link,
                    title=to_str_or_empty(item.get("title")),
                    summary=to_str_or_empty(item.get("description")),
                    url=link,
                    image=to_str_or_none(item.get("image")),
                    published_at=to_str_or_none(item.get("published_at")),
                    source_name=to_str_or_empty(item.get("source")) or "mediastack",
                    source_country=self._country_code(item.get("country"), country),
                    provider=self.name,
                    content_raw=to_str_or_empty(item.get("description")),
                )
            )
        return articles
