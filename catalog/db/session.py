from typing import Annotated, Any
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker, Session
from collections.abc import Generator
from fastapi import Depends
from catalog.core.config import settings
from catalog.models.base import Base

# registers the tables on Base.metadata
import catalog.models.author  # noqa: F401
import catalog.models.book  # noqa: F401


def build_engine(url: str) -> Engine:
    """
    Create an engine for `url`. SQLite connections are shared with the
    thread pool that runs the concurrent reads, so the same-thread check is off.
    """
    connect_args: dict[str, Any] = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db(bind: Engine = engine) -> None:
    """Create the catalog tables if they are missing."""
    Base.metadata.create_all(bind=bind)


def get_session_factory() -> sessionmaker[Session]:
    """Session factory used by operations that open one session per concurrent read."""
    return SessionLocal


def get_db(
    session_factory: Annotated[sessionmaker[Session], Depends(get_session_factory)],
) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
