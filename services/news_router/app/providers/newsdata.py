from services.news_router.app.providers.base import NewsProvider
from services.news_router.app.utils import to_str_or_empty, to_str_or_none
from shared.schemas.articles import NormalizedArticle


class NewsDataProvider(NewsProvider):
    """newsdata.io latest-news endpoint, technology category."""

    name = "newsdata"
    endpoint = "https://newsdata.io/api/1/news"

    def build_request(self, country, limit, query, page):
        params = {
            "apikey": self.api_key,
            "category": "technology",
            "language": "en",
            "country": country,
            "q": query or self.query_terms,
        }
        # page 1 is the default; only forward later pages
        if page > 1:
            params["page"] = page
        return self.endpoint, params

    def normalize(self, payload, country, limit):
        articles = []
        for item in (payload.get("results") or [])[:limit]:
            if not isinstance(item, dict):
                continue
            link = to_str_or_empty(item.get("link"))
            countries = item.get("country")
            source_country = country
            # NewsData usually sends full country names here; only a two-letter code is usable
            if isinstance(countries, list) and countries:
                code = to_str_or_empty(countries[0]).strip().lower()
                if len(code) == 2 and code.isalpha():
                    source_country = code
            articles.append(
                NormalizedArticle(
                    id=to_str_or_empty(item.get("article_id")) or link,
                    title=to_str_or_empty(item.get("title")),
                    summary=to_str_or_empty(item.get("description")) or to_str_or_empty(item.get("content")),
                    url=link,
                    image=to_str_or_none(item.get("image_url")),
                    published_at=to_str_or_none(item.get("pubDate")),
                    source_name=to_str_or_empty(item.get("source_id")) or "NewsData",
                    source_country=source_country,
                    provider=self.name,
                    content_raw=to_str_or_empty(item.get("content")) or to_str_or_empty(item.get("description")),
                )
            )
        return articles
