# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
SQLAlchemy declarative base and the session factory used by the SQL
storage backend.  Only built when ``DATABASE_URL`` is configured; the default
deployment keeps everything in memory.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def create_session_factory(database_url: str) -> sessionmaker:
    """
    Create the engine for *database_url*, make sure the tables exist and
    return a session factory.

    Sessions keep their objects loaded after commit so records can be
    handed out past the end of the unit of work.
    """
    kwargs = {"pool_pre_ping": True}
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        # Handlers run in FastAPI's thread pool
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # A single shared connection, otherwise every session would see
            # its own empty in-memory database
            kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)

    # Lazy import: the models register themselves on Base
    import models.product        # noqa: F401
    import models.uploaded_file  # noqa: F401
    import models.user           # noqa: F401

    Base.metadata.create_all(engine)
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )
