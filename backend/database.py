# backend/database.py
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def normalize_url(url: str) -> str:
    # Hosting providers hand out postgres://, SQLAlchemy requires postgresql://
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _enable_sqlite_fk(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _load_models():
    # Register every model on Base.metadata before creating tables
    import models.users  # noqa: F401
    import models.cake  # noqa: F401
    import models.cart  # noqa: F401
    import models.order  # noqa: F401
    import models.contact  # noqa: F401
    import models.audit_log  # noqa: F401


class Database:
    """Owns the engine (and its connection pool) plus the session factory.

    Built once by the application factory, opened on startup and disposed on
    shutdown. Request handlers get sessions through ``get_db``.
    """

    def __init__(self, url: str, pool_size: int = 10, pool_timeout: int = 30, echo: bool = False):
        self.url = normalize_url(url)

        if self.url.startswith("sqlite"):
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            # In-memory databases live inside a single connection
            if ":memory:" in self.url or self.url in ("sqlite://", "sqlite:///"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs = {
                "pool_size": pool_size,
                "max_overflow": 0,
                "pool_timeout": pool_timeout,
                "pool_pre_ping": True,
            }

        self.engine: Engine = create_engine(self.url, echo=echo, **engine_kwargs)
        if self.url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_fk)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        _load_models()
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        _load_models()
        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Run a unit of work: commit on success, roll back and re-raise on error."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def get_db(request: Request) -> Iterator[Session]:
    database: Optional[Database] = request.app.state.db
    db = database.session()
    try:
        yield db
    finally:
        db.close()
