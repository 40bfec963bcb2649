from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Base class for all table models
Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    """
    Create the database engine - manages the connection pool.

    SQLite connections are shared across the request threadpool, so the
    same-thread check is disabled. A pure in-memory SQLite database only
    exists on one connection, which StaticPool keeps alive.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    connect_args = {"check_same_thread": False}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(database_url, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(database_url, connect_args=connect_args)


def build_session_factory(engine: Engine) -> sessionmaker:
    """
    Create tables for every model registered on Base and return a session factory.

    autocommit=False: changes require an explicit commit
    expire_on_commit=False: rows stay readable after commit, the repositories
    copy them into entities outside the transaction
    """
    # Import registers the tables on Base.metadata
    from kanban_api.models import board, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
