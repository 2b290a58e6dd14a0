from services.news_router.app.providers.base import NewsProvider
from services.news_router.app.utils import to_str_or_empty, to_str_or_none
from shared.schemas.articles import NormalizedArticle


class GuardianProvider(NewsProvider):
    """Guardian content API, technology section. Not country-aware; always tagged ``gb``."""

    name = "guardian"
    endpoint = "https://content.guardianapis.com/search"

    def build_request(self, country, limit, query, page):
        params = {
            "q": query or self.query_terms,
            "section": "technology",
            "order-by": "newest",
            "show-fields": "trailText,bodyText,thumbnail",
            "api-key": self.api_key,
            "page-size": limit,
            "page": page,
        }
        return self.endpoint, params

    def normalize(self, payload, country, limit):
        response = payload.get("response") or {}
        articles = []
        for item in (response.get("results") or [])[:limit]:
            if not isinstance(item, dict):
                continue
            fields = item.get("fields") if isinstance(item.get("fields"), dict) else {}
            body_text = to_str_or_empty(fields.get("bodyText"))
            trail_text = to_str_or_empty(fields.get("trailText"))
            articles.append(
                NormalizedArticle(
                    id=to_str_or_empty(item.get("id")) or to_str_or_empty(item.get("webUrl")),
                    title=to_str_or_empty(item.get("webTitle")),
                    summary=trail_text or body_text[:300],
                    url=to_str_or_empty(item.get("webUrl")),
                    image=to_str_or_none(fields.get("thumbnail")),
                    published_at=to_str_or_none(item.get("webPublicationDate")),
                    source_name="The Guardian",
                    source_country="gb",
                    provider=self.name,
                    content_raw=body_text or trail_text,
                )
            )
        return articles
