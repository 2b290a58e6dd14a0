"""
Optional AI explainer pass over template-rewritten articles.

When an OpenAI key is configured each article's body, summary, takeaways and
SEO fields are replaced by a model-written explainer. Title and slug stay as
the template produced them so re-ingesting a story still lands on the same
content row. Any failure leaves the template rewrite in place.
"""

import json
from typing import Any, Dict, Optional

from openai import AsyncOpenAI
from prometheus_client import Counter

from services.news_router.app.utils import collapse_whitespace, truncate
from shared.app_logging.logger import get_logger
from shared.config.settings import OpenAISettings
from shared.schemas.articles import NormalizedArticle

logger = get_logger("news_router.explainer")

AI_FALLBACKS = Counter("news_router_ai_fallbacks_total", "Articles that kept the template rewrite after an AI failure")

MIN_BODY_LENGTH = 400

SYSTEM_PROMPT = (
    "You are a Tech Beetle editor. Write original explainer articles, not paraphrases. "
    "Use the provided content_raw/summary for facts; do NOT invent details. "
    "Body: 8-12 sentences (~550-600 words) that cover the key facts, context, and implications. "
    "Takeaways: 3-5 concise bullets. Tone: concise, neutral, helpful. "
    "Return ONLY valid JSON with the keys: summary, body, takeaways, seo_title, seo_description."
)


def _as_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _as_points(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [point.strip() for point in value if isinstance(point, str) and point.strip()]


class AIExplainer:
    def __init__(self, settings: OpenAISettings, client: Optional[AsyncOpenAI] = None):
        self.settings = settings
        self.client = client
        if self.client is None and settings.api_key:
            self.client = AsyncOpenAI(api_key=settings.api_key)

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def _complete(self, article: NormalizedArticle) -> Dict[str, Any]:
        payload = {
            "title": article.title,
            "summary": article.summary,
            "content_raw": article.content_raw,
            "source": article.source_name,
            "published_at": article.published_at,
        }
        response = await self.client.chat.completions.create(
            model=self.settings.model,
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": "Create a TechBeetle explainer based on this source. Respond with JSON only.\n"
                    + json.dumps(payload, indent=2),
                },
            ],
        )
        parsed = json.loads(response.choices[0].message.content or "")
        if not isinstance(parsed, dict):
            raise ValueError("explainer response is not a JSON object")
        return parsed

    async def explain(self, article: NormalizedArticle) -> NormalizedArticle:
        """Return the article with AI-written fields, or unchanged if the model call fails."""
        if not self.configured:
            return article

        try:
            ai = await self._complete(article)
        except Exception as e:
            logger.error(f"AI explainer failed for {article.slug}: {e}")
            AI_FALLBACKS.inc()
            return article

        summary = collapse_whitespace(_as_text(ai.get("summary"))) or article.summary
        takeaways = _as_points(ai.get("takeaways")) or _as_points(ai.get("key_takeaways"))
        body = _as_text(ai.get("body")) or summary
        if not body:
            logger.warning(f"AI explainer returned no body for {article.slug}, keeping template")
            AI_FALLBACKS.inc()
            return article
        if len(body) < MIN_BODY_LENGTH and article.content_raw:
            body = f"{body}\n\n{article.content_raw[:1200]}"

        return article.model_copy(
            update={
                "summary": summary,
                "content": body,
                "takeaways": takeaways or article.takeaways,
                "seo_title": _as_text(ai.get("seo_title"))[:120] or article.seo_title,
                "seo_description": _as_text(ai.get("seo_description"))[:180]
                or truncate(summary, 155)
                or article.seo_description,
            }
        )
