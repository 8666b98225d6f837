# cybertaxi/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with MySQL (PyMySQL driver). All models are auto-imported here
so create_tables() creates every table in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from cybertaxi.config import settings

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,          # Auto-reconnect if DB connection drops
    pool_size=10,
    max_overflow=20,
    pool_recycle=3600,           # MySQL drops idle connections after wait_timeout
    echo=False,                  # Set True to log all SQL queries (debug only)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from cybertaxi.models.player import Player    # noqa
    from cybertaxi.models.vehicle import Vehicle  # noqa
    from cybertaxi.models.garage import Garage    # noqa

    Base.metadata.create_all(bind=bind or engine)
