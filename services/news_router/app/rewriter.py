"""
Deterministic enrichment of normalized articles: slug, SEO fields, a
synthesized body and a few takeaways. Nothing here reads the clock or the
network, so the same article always rewrites to the same output.
"""

import hashlib
import re
from typing import List

from services.news_router.app.utils import collapse_whitespace, parse_timestamp
from shared.schemas.articles import NormalizedArticle

SLUG_MAX_LENGTH = 80
SEO_DESCRIPTION_LENGTH = 150

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def to_slug(text: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    slug = _NON_ALNUM.sub("-", (text or "").lower()).strip("-")
    return slug[:max_length].rstrip("-")


def format_date(value: str) -> str:
    """YYYY-MM-DD for anything parseable, otherwise the input unchanged."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return value
    return parsed.date().isoformat()


def _fallback_slug(article: NormalizedArticle) -> str:
    seed = article.id or article.url or article.title or article.provider
    digest = hashlib.sha1(seed.encode("utf-8")).hexdigest()[:12]
    return f"{to_slug(article.provider) or 'news'}-{digest}"


def build_takeaways(article: NormalizedArticle) -> List[str]:
    takeaways = [f"Source: {article.source_name}"]
    if article.published_at:
        takeaways.append(f"Published {format_date(article.published_at)}")
    else:
        takeaways.append("Recent")
    if article.source_country:
        takeaways.append(f"Region: {article.source_country.upper()}")
    return takeaways


def rewrite_article(article: NormalizedArticle, brand: str = "TechBeetle") -> NormalizedArticle:
    summary = collapse_whitespace(article.summary)
    raw = (article.content_raw or "").strip()
    takeaways = build_takeaways(article)

    if article.source_country:
        attribution = (
            f"Originally reported by {article.source_name} ({article.source_country.upper()}); "
            f"this is a brief for {brand} readers."
        )
    else:
        attribution = f"Originally reported by {article.source_name}; this is a brief for {brand} readers."

    sections = []
    if raw:
        sections.append(raw)
    if summary and summary != collapse_whitespace(raw):
        sections.append(summary)
    sections.append(attribution)
    sections.append("Key takeaways:\n" + "\n".join(f"- {point}" for point in takeaways))

    seo_description = summary[:SEO_DESCRIPTION_LENGTH] if summary else f"Brief update for {brand} readers."

    return article.model_copy(
        update={
            "summary": summary,
            "slug": to_slug(article.title) or _fallback_slug(article),
            "seo_title": f"{article.title} | {brand} Brief",
            "seo_description": seo_description,
            "content": "\n\n".join(sections),
            "takeaways": takeaways,
        }
    )
