"""Database package: Database (engine, sessions, retrying transactions)."""

import threading
from contextlib import contextmanager
from typing import Callable, Generator, Optional, TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from luna_ops.config import DATABASE_URL, TRANSACTION_MAX_ATTEMPTS
from luna_ops.db.base import Base

# Import all models so Base.metadata has all tables
from luna_ops.db import models  # noqa: F401
from luna_ops.exceptions import TransactionConflict
from luna_ops.utils.logger import get_logger, log_context

logger = get_logger("luna_ops.db")

T = TypeVar("T")

# Seconds a SQLite connection waits on a locked database before failing
SQLITE_BUSY_TIMEOUT = 15


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _create_engine(url: str):
    """Create engine with check_same_thread=False for use from executor threads."""
    if not _is_sqlite(url):
        return create_engine(url, echo=False, pool_pre_ping=True)
    engine = create_engine(
        url,
        echo=False,
        connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def _is_lock_error(exc: OperationalError) -> bool:
    text = str(exc.orig).lower()
    return "database is locked" in text or "could not serialize" in text or "deadlock" in text


def _is_unique_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "pgcode", None) == "23505":
        return True
    text = str(exc.orig).lower()
    return "unique constraint" in text or "duplicate key" in text


class Database:
    """Engine plus session factory for one database URL.

    ``session()`` is a unit of work that commits on success and rolls back on
    error. ``run_transaction(fn)`` is the same, but retries ``fn`` with a fresh
    session when the commit loses an optimistic-lock race.
    """

    def __init__(self, url: str = DATABASE_URL, max_attempts: int = TRANSACTION_MAX_ATTEMPTS):
        self.url = url
        self.max_attempts = max(1, max_attempts)
        self.engine = _create_engine(url)
        self._session_factory = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )
        self._init_lock = threading.Lock()
        self._initialized = False

    def init(self, seed: bool = False) -> None:
        """Create tables if missing. With ``seed``, insert the default raw materials list."""
        with self._init_lock:
            Base.metadata.create_all(bind=self.engine)
            self._initialized = True
        if seed:
            from luna_ops.db.seed_data import seed_raw_materials

            with self.session() as session:
                added = seed_raw_materials(session)
            logger.info("db.seed.raw_materials", added=added)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Context manager yielding a DB session. Creates tables on first use."""
        if not self._initialized:
            self.init()
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def run_transaction(
        self,
        fn: Callable[[Session], T],
        max_attempts: Optional[int] = None,
        name: str = "transaction",
    ) -> T:
        """Run ``fn(session)`` and commit, retrying on concurrent-write conflicts.

        ``fn`` must be safe to call again from the top: it re-reads everything
        it writes. Business errors raised by ``fn`` propagate unchanged after
        rollback. Raises TransactionConflict when every attempt conflicted.
        """
        if not self._initialized:
            self.init()
        attempts = max_attempts or self.max_attempts
        last_error: Optional[Exception] = None
        for attempt in range(1, attempts + 1):
            session = self._session_factory()
            try:
                with log_context(transaction=name, attempt=attempt):
                    result = fn(session)
                    session.commit()
                return result
            except StaleDataError as e:
                session.rollback()
                last_error = e
                logger.info("db.transaction.stale", name=name, attempt=attempt)
            except OperationalError as e:
                session.rollback()
                if not _is_lock_error(e):
                    raise
                last_error = e
                logger.info("db.transaction.locked", name=name, attempt=attempt)
            except IntegrityError as e:
                session.rollback()
                if not _is_unique_violation(e):
                    raise
                # Two writers inserted the same new key; the retry sees the winner's row
                last_error = e
                logger.info("db.transaction.integrity_retry", name=name, attempt=attempt, error=str(e.orig))
            except Exception:
                session.rollback()
                raise
            finally:
                session.close()
        logger.warning("db.transaction.conflict", name=name, attempts=attempts)
        raise TransactionConflict(attempts) from last_error

    def dispose(self) -> None:
        self.engine.dispose()


__all__ = ["Database"]
