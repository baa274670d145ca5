# marketplace/database.py
from sqlmodel import SQLModel, create_engine, Session

from marketplace.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Engine
#
# - SQLite (default): check_same_thread=False so the session can be
#   used from FastAPI's threadpool.
# - Anything else (e.g. Postgres): pool_pre_ping to drop stale
#   connections before use.
# ---------------------------------------------------------

db_url = settings.DATABASE_URL

if db_url.startswith("sqlite"):
    engine = create_engine(
        db_url,
        echo=settings.DATABASE_ECHO,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        db_url,
        echo=settings.DATABASE_ECHO,
        pool_pre_ping=True,
    )


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
