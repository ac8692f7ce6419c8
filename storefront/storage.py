# storefront/storage.py
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import Settings
from .models import Base


_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def create_db_engine(database_url: str) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # FastAPI serves sync routes from a threadpool
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


def configure(settings: Settings) -> Engine:
    """Create the process-wide engine and session factory."""
    global _engine, _session_factory

    _engine = create_db_engine(settings.database_url)
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)
    return _engine


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(engine)


def get_session() -> Iterator[Session]:
    if _session_factory is None:
        raise RuntimeError("storage.configure() must be called before opening sessions")
    session = _session_factory()
    try:
        yield session
    finally:
        session.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """``get_session`` for use outside request handling."""
    yield from get_session()
