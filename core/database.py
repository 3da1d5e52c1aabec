"""
Remote relational store (PostgreSQL) connection and setup
Every collection falls back to local JSON documents when this is unavailable
"""
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from core.config import DATABASE_URL, logger

engine = None
SessionLocal = None

if DATABASE_URL:
    try:
        engine = create_engine(
            DATABASE_URL,
            pool_pre_ping=True,  # Verify connections before using
            pool_size=10,
            max_overflow=20,
            echo=False
        )
        # Create session factory
        SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    except Exception as ex:
        logger.warning(f"Database engine not created, using local fallback only: {ex}")
        engine = None
        SessionLocal = None
else:
    logger.info("DATABASE_URL not set - collections will use local fallback storage")

# Base class for ORM models
Base = declarative_base()


class RecordMixin:
    """Row -> plain dict, the shape shared with the local fallback documents"""

    def to_dict(self):
        out = {}
        for col in self.__table__.columns:
            value = getattr(self, col.key)
            if isinstance(value, datetime):
                value = value.isoformat()
            out[col.key] = value
        return out


def get_db():
    """
    Dependency for FastAPI routes to get database session
    Yields None when no database is configured
    """
    if SessionLocal is None:
        yield None
        return
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Initialize database tables
    Call this on application startup
    """
    if engine is None:
        return False
    # Import models so they register on Base.metadata
    import models.catalog  # noqa: F401
    import models.series  # noqa: F401
    import models.coins  # noqa: F401
    import models.orders  # noqa: F401
    import models.featured  # noqa: F401
    import models.shop_all  # noqa: F401
    import models.pages  # noqa: F401
    import models.user  # noqa: F401
    try:
        Base.metadata.create_all(bind=engine)
        return True
    except Exception as ex:
        logger.warning(f"init_db failed: {ex}")
        return False
