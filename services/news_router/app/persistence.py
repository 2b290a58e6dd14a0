"""
Best-effort persistence of rewritten articles into the content store.

Each article is its own upsert keyed on slug, so a crash mid-batch leaves the
rows already written, and re-running the same batch converges to the same
state. Re-ingesting a slug overwrites every column except ``id`` and
``created_at``, including edits made to that row by hand.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from prometheus_client import Counter
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from services.news_router.app.categories import FALLBACK_CATEGORY, detect_category
from services.news_router.app.rewriter import to_slug
from services.news_router.app.utils import normalize_url, parse_timestamp, truncate
from shared.app_logging.logger import get_logger
from shared.database.models.category import Category
from shared.database.models.content import Content
from shared.database.models.content_source import ContentSource
from shared.database.models.ingestion_log import IngestionLog
from shared.schemas.articles import NormalizedArticle

logger = get_logger("news_router.persistence")

ARTICLES_PERSISTED = Counter("news_router_articles_persisted_total", "Content rows upserted")
PERSIST_FAILURES = Counter("news_router_persist_failures_total", "Articles skipped because their upsert failed")

CATEGORY_COLOR = "#3B82F6"


@dataclass
class PersistReport:
    saved: int = 0
    failed: int = 0
    skipped: int = 0


@dataclass(frozen=True)
class SideEffect:
    name: str
    run: Callable[[], None]


def run_side_effects(tasks: Iterable[SideEffect]) -> List[str]:
    """Run each task in its own error boundary; return the names of those that failed."""
    failed = []
    for task in tasks:
        try:
            task.run()
        except Exception as e:
            logger.warning(f"Side effect {task.name} failed: {e}")
            failed.append(task.name)
    return failed


def _upsert(session: Session, model, values: Dict, conflict_column: str, preserve: Sequence[str] = ()):
    """INSERT ... ON CONFLICT (conflict_column) DO UPDATE, returning the row id."""
    dialect = session.get_bind().dialect.name
    insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
    stmt = insert(model).values(**values)
    updates = {
        key: stmt.excluded[key]
        for key in values
        if key != conflict_column and key not in preserve
    }
    stmt = stmt.on_conflict_do_update(index_elements=[conflict_column], set_=updates)
    return session.execute(stmt.returning(model.id)).scalar_one()


class ArticlePersister:
    def __init__(self, session_factory: Callable[[], Session], author_id: Optional[str]):
        self.session_factory = session_factory
        self.author_id = author_id
        self._category_ids: Dict[str, UUID] = {}

    def ensure_category(self, session: Session, slug: str, name: str) -> Optional[UUID]:
        """Look up a category by slug, creating it when missing. None on failure."""
        cached = self._category_ids.get(slug)
        if cached:
            return cached

        try:
            category_id = session.execute(select(Category.id).where(Category.slug == slug)).scalar_one_or_none()
            if category_id is None:
                category = Category(
                    name=name,
                    slug=slug,
                    is_active=True,
                    description="Auto-created by news-router",
                    color=CATEGORY_COLOR,
                )
                session.add(category)
                session.commit()
                category_id = category.id
                logger.info(f"Created category {slug}")
        except IntegrityError:
            # created concurrently by another ingestion
            session.rollback()
            category_id = session.execute(select(Category.id).where(Category.slug == slug)).scalar_one_or_none()
        except Exception as e:
            session.rollback()
            logger.error(f"Category lookup/insert failed for {slug}: {e}")
            return None

        if category_id:
            self._category_ids[slug] = category_id
        return category_id

    def resolve_category(self, session: Session, article: NormalizedArticle, country: str) -> Optional[UUID]:
        slug, name = detect_category(article, country)
        category_id = self.ensure_category(session, slug, name)
        if category_id:
            return category_id
        logger.warning(f"Falling back to {FALLBACK_CATEGORY[0]} category for {article.slug}")
        return self.ensure_category(session, *FALLBACK_CATEGORY)

    def _content_values(self, article: NormalizedArticle, country: str, category_id: Optional[UUID]) -> Dict:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        summary = article.summary or ""
        return {
            "title": article.title,
            "slug": article.slug or to_slug(article.title),
            "excerpt": truncate(summary, 200),
            "content": article.content or summary,
            "provider": article.provider or None,
            "takeaways": article.takeaways or None,
            "featured_image": article.image,
            "content_type": "news",
            "status": "published",
            "author_id": self.author_id,
            "category_id": category_id,
            "published_at": parse_timestamp(article.published_at) or now,
            "source_name": article.source_name or None,
            "source_country": (article.source_country or country or None),
            "meta_title": article.seo_title or truncate(article.title, 60),
            "meta_description": article.seo_description or truncate(summary or article.title, 160),
            "is_featured": False,
            "is_indexable": False,
            "reading_time": 5,
            "created_at": now,
            "updated_at": now,
        }

    def upsert_content(self, article: NormalizedArticle, country: str) -> UUID:
        session = self.session_factory()
        try:
            category_id = self.resolve_category(session, article, country)
            values = self._content_values(article, country, category_id)
            content_id = _upsert(session, Content, values, "slug", preserve=("created_at",))
            session.commit()
            return content_id
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def upsert_source(self, content_id: UUID, article: NormalizedArticle) -> None:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        session = self.session_factory()
        try:
            _upsert(
                session,
                ContentSource,
                {
                    "content_id": content_id,
                    "source_url": normalize_url(article.url) or article.url,
                    "source_name": article.source_name,
                    "source_type": article.provider,
                    "last_updated": now,
                    "scraped_at": now,
                },
                "content_id",
            )
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def record_ingestion(self, country: str, count: int) -> None:
        session = self.session_factory()
        try:
            session.add(IngestionLog(country=country, count=count, source="news-router"))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def persist(self, articles: Sequence[NormalizedArticle], country: str) -> PersistReport:
        report = PersistReport()
        if not self.author_id:
            logger.warning("DEFAULT_AUTHOR_ID is not configured; skipping persistence to content.")
            report.skipped = len(articles)
            return report

        for article in articles:
            try:
                content_id = self.upsert_content(article, country)
            except Exception as e:
                logger.error(f"Content upsert failed for {article.slug}: {e}")
                PERSIST_FAILURES.inc()
                report.failed += 1
                continue

            report.saved += 1
            ARTICLES_PERSISTED.inc()
            run_side_effects([SideEffect("content_sources", partial(self.upsert_source, content_id, article))])

        logger.info(f"Persisted {report.saved}/{len(articles)} articles for {country} ({report.failed} failed)")
        return report
