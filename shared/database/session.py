import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from shared.app_logging.logger import get_logger
from shared.config.settings import get_settings

from .base import Base
from .models import category, content, content_source, ingestion_log  # noqa: F401 registers tables

logger = get_logger("database")

settings = get_settings()
POSTGRES_URL = settings.database.postgres_url

logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

logger.info(f"▶︎ Connecting to database: {POSTGRES_URL.split('@')[1] if '@' in POSTGRES_URL else POSTGRES_URL}")


def build_engine(url: str):
    """Create an engine; connection pooling options only apply to server databases."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


engine = build_engine(POSTGRES_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def init_db(bind=None):
    """Initialize database tables."""
    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("✅ Database initialized successfully")
    except Exception as e:
        logger.error(f"❌ Failed to initialize database: {e}")
        raise


def get_db_session():
    """Get a database session with proper error handling."""
    session = SessionLocal()
    try:
        yield session
    except Exception as e:
        logger.error(f"Database session error: {e}")
        session.rollback()
        raise
    finally:
        session.close()
