import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from flashstudy.core.config import settings
from flashstudy.db.base import Base

logger = logging.getLogger(__name__)


def build_engine(url: str, pool_timeout: int = settings.DB_POOL_TIMEOUT):
    db_url = make_url(url)
    if db_url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": pool_timeout}}
        if db_url.database in (None, "", ":memory:"):
            # one shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(db_url, **kwargs)

    return create_engine(
        db_url,
        pool_pre_ping=True,
        pool_timeout=pool_timeout,
    )


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    import flashstudy.models  # noqa: F401  registers the tables

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables are ready")
