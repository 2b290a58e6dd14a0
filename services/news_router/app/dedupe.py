from typing import Iterable, List

from shared.schemas.articles import NormalizedArticle


def dedupe_key(article: NormalizedArticle) -> str:
    """lowercase(title) | source name | published timestamp (or empty)."""
    return f"{article.title.lower()}|{article.source_name}|{article.published_at or ''}"


def dedupe_articles(articles: Iterable[NormalizedArticle]) -> List[NormalizedArticle]:
    """
    Drop articles whose key was already seen, keeping the first occurrence.

    Matching is exact: whitespace differences in the title or a shifted
    timestamp make two stories distinct, so near-duplicate wire copies from
    different providers can both survive.
    """
    seen = set()
    unique = []
    for article in articles:
        key = dedupe_key(article)
        if key in seen:
            continue
        seen.add(key)
        unique.append(article)
    return unique


def dedupe_slugs(articles: Iterable[NormalizedArticle]) -> List[NormalizedArticle]:
    """
    Keep the first rewritten article per slug.

    The slug is the content store's key, so two same-titled stories from
    different sources would otherwise overwrite each other on persist.
    """
    seen = set()
    unique = []
    for article in articles:
        if article.slug in seen:
            continue
        seen.add(article.slug)
        unique.append(article)
    return unique
