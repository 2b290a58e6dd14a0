import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, Uuid, func

from ..base import Base


class Content(Base):
    """A published content item. Ingested news rows are upserted on ``slug``."""

    __tablename__ = "content"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=False, default="")
    provider = Column(String, nullable=True)
    takeaways = Column(JSON, nullable=True)
    featured_image = Column(Text, nullable=True)
    content_type = Column(String, nullable=False, default="news", index=True)
    status = Column(String, nullable=False, default="published")
    author_id = Column(String, nullable=False)
    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=True)
    published_at = Column(DateTime, nullable=True)
    source_name = Column(String, nullable=True)
    source_country = Column(String(2), nullable=True)
    meta_title = Column(Text, nullable=True)
    meta_description = Column(Text, nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_indexable = Column(Boolean, nullable=False, default=False)
    reading_time = Column(Integer, nullable=False, default=5)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), nullable=False)
