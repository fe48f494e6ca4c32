# app/database.py
from typing import Any

from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Postgres connection (via Supabase pooler)
#
# - sslmode=require   : enforce SSL when running in the cloud
# - pool_size=1       : keep only 1 connection to the pooler
# - max_overflow=0    : do not open extra connections beyond the pool
# - pool_pre_ping=True: validate connections before using them
#
# Any other URL (sqlite:// for local runs) keeps SQLAlchemy defaults.
# ---------------------------------------------------------

db_url = settings.DATABASE_URL

engine_kwargs: dict[str, Any] = {
    "echo": False,  # set to True if you want to debug SQL queries
    "pool_pre_ping": True,
}

if db_url.startswith("postgres"):
    if "sslmode=" not in db_url:
        if "?" in db_url:
            db_url = db_url + "&sslmode=require"
        else:
            db_url = db_url + "?sslmode=require"
    engine_kwargs.update(pool_size=1, max_overflow=0)
elif db_url.startswith("sqlite"):
    engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(db_url, **engine_kwargs)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    One session per request; services commit once per operation.
    """
    with Session(engine) as session:
        yield session
