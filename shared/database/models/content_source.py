import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid

from ..base import Base


class ContentSource(Base):
    __tablename__ = "content_sources"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    content_id = Column(Uuid, ForeignKey("content.id", ondelete="CASCADE"), unique=True, nullable=False)
    source_url = Column(Text, nullable=False, index=True)
    source_name = Column(String, nullable=True)
    source_type = Column(String, nullable=True)
    last_updated = Column(DateTime, nullable=True)
    scraped_at = Column(DateTime, nullable=True)
