# whisperer/core/database.py

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from whisperer.core.config import get_settings
from whisperer.models.base import Base
import whisperer.models  # noqa: F401  registers every table on Base.metadata


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES clauses unless this is set on each connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url, pool_size: int = 20, pool_timeout: int = 2):
    url = make_url(url)
    if url.get_backend_name() == "sqlite":
        engine = create_engine(url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    # Bounded pool; a request that cannot get a connection within pool_timeout fails.
    return create_engine(url, pool_size=pool_size, max_overflow=0, pool_timeout=pool_timeout)


_settings = get_settings()
engine = build_engine(_settings.sqlalchemy_url, _settings.db_pool_size, _settings.db_pool_timeout)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)


def get_db():
    """
    Yields a database session for FastAPI dependencies.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
