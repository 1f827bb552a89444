import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from channeldesk.config import settings

# Configure engine parameters based on environment
if settings.is_sqlite:
    # Local SQLite file - single connection per thread, no pool sizing
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},
        echo=settings.debug,
    )
elif settings.is_production:
    # Production - Use connection pooler for serverless
    engine = create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=5,  # allow parallel requests
        max_overflow=10,  # allow spike load briefly
        pool_timeout=30,  # timeout before erroring
        pool_recycle=1800,  # recycle every 30min to avoid stale connections
        echo=False,
    )
else:
    # Local development - Larger pool
    engine = create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        echo=settings.debug,
    )


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite only enforces ON DELETE CASCADE with foreign keys switched on."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
