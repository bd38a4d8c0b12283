"""
Database configuration and session management for ChurchOS.
"""

import logging
import os
from contextlib import contextmanager
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool


logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///churchos.db"

engine = None
SessionLocal = sessionmaker(autoflush=False, expire_on_commit=False)
Base = declarative_base()


def normalize_database_url(database_url):
    """Fix Heroku Postgres URLs for SQLAlchemy 2.0 and apply the default"""
    database_url = database_url or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)
    return database_url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def configure_engine(database_url=None):
    """Create the engine for ``database_url`` and bind the session factory to it"""
    global engine
    database_url = normalize_database_url(database_url)

    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every pool checkout is a new empty database
            options["poolclass"] = StaticPool
        engine = create_engine(database_url, echo=False, **options)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(
            database_url,
            echo=False,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,
            pool_recycle=300,
        )

    SessionLocal.configure(bind=engine)
    logger.info("Database engine configured for %s", engine.url.render_as_string(hide_password=True))
    return engine


def init_db():
    """Initialize database tables"""
    if engine is None:
        configure_engine()
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)


def drop_db():
    Base.metadata.drop_all(bind=engine)


@contextmanager
def get_db():
    """Context manager for database sessions with automatic commit/rollback"""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
