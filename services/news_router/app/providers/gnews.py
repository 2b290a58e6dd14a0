from services.news_router.app.providers.base import NewsProvider
from services.news_router.app.utils import to_str_or_empty, to_str_or_none
from shared.schemas.articles import NormalizedArticle


class GNewsProvider(NewsProvider):
    """gnews.io: technology top headlines, or a search when a query is given."""

    name = "gnews"
    headlines_endpoint = "https://gnews.io/api/v4/top-headlines"
    search_endpoint = "https://gnews.io/api/v4/search"

    def build_request(self, country, limit, query, page):
        params = {
            "token": self.api_key,
            "lang": "en",
            "country": country,
            "max": limit,
            "page": page,
            "q": query or self.query_terms,
        }
        if query:
            return self.search_endpoint, params
        params["topic"] = "technology"
        return self.headlines_endpoint, params

    def normalize(self, payload, country, limit):
        articles = []
        for item in (payload.get("articles") or [])[:limit]:
            if not isinstance(item, dict):
                continue
            link = to_str_or_empty(item.get("url"))
            source = item.get("source")
            source_name = to_str_or_empty(source.get("name")) if isinstance(source, dict) else ""
            articles.append(
                NormalizedArticle(
                    id=link,
                    title=to_str_or_empty(item.get("title")),
                    summary=to_str_or_empty(item.get("description")) or to_str_or_empty(item.get("content")),
                    url=link,
                    image=to_str_or_none(item.get("image")),
                    published_at=to_str_or_none(item.get("publishedAt")),
                    source_name=source_name or "GNews",
                    source_country=country,
                    provider=self.name,
                    content_raw=to_str_or_empty(item.get("content")) or to_str_or_empty(item.get("description")),
                )
            )
        return articles
