"""Database connection and session management for nexushub.

The durable key-value store keeps one row per storage key in `kv_entries`.
SQLite by default; any other SQLAlchemy URL can be given via `DATABASE_URL`.
"""

import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv

load_dotenv()

# Database URL - SQLite by default
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./nexushub.db")


def _is_sqlite_url(database_url: str) -> bool:
    return (database_url or "").startswith("sqlite")


def get_engine_kwargs(database_url: str) -> dict:
    """create_engine kwargs for the key-value table's database.

    The store opens a short session per read or write, so the default pool is
    enough for server databases; only SQLite needs cross-thread connections
    (FastAPI runs sync work in a threadpool).
    """
    engine_kwargs: dict = {
        "echo": os.getenv("NEXUS_SQL_ECHO", "false").lower() == "true",
        "pool_pre_ping": True,
    }
    if _is_sqlite_url(database_url):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    return engine_kwargs


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, **get_engine_kwargs(database_url))


# Create engine (module-level singleton)
engine = build_engine(DATABASE_URL)


@event.listens_for(engine, "connect")
def set_sqlite_pragmas(dbapi_conn, connection_record):
    """Enable WAL mode on SQLite so reads are not blocked by the single writer."""
    if _is_sqlite_url(DATABASE_URL):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for declarative models
Base = declarative_base()


def init_db(engine_override: Engine = None) -> None:
    """Create the key-value table if it does not exist yet."""
    # Import models so they register with Base.metadata
    from nexushub.database import models  # noqa: F401

    Base.metadata.create_all(bind=engine_override or engine)
