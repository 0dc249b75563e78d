# app/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy; SQLite by default, any SQLAlchemy URL (e.g. PostgreSQL) via
DATABASE_URL. All models are auto-imported here so create_tables() creates
every table in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # Sessions are handed between the request thread and the event loop
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,          # Auto-reconnect if DB connection drops
        "pool_size": 10,
        "max_overflow": 20,
    }


engine = create_engine(
    settings.DATABASE_URL,
    echo=False,                  # Set True to log all SQL queries (debug only)
    **_engine_options(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency - yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from app.models.user import User                  # noqa
    from app.models.vehicle import Vehicle            # noqa
    from app.models.gate import Gate                  # noqa
    from app.models.access_log import AccessLog       # noqa
    from app.models.visitor import Visitor            # noqa

    Base.metadata.create_all(bind=engine)


def drop_tables():
    """Drops every table. Used by the test suite to start from a clean schema."""
    import app.models  # noqa

    Base.metadata.drop_all(bind=engine)
