import uuid

from sqlalchemy import Column, DateTime, Integer, String, Uuid, func

from ..base import Base


class IngestionLog(Base):
    __tablename__ = "ingestion_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    country = Column(String(2), nullable=False)
    count = Column(Integer, nullable=False, default=0)
    source = Column(String, nullable=False, default="news-router")
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
