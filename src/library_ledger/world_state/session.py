"""
Database session management for the SQL-backed world state.

The ledger's atomicity comes from here: each invocation runs inside one
session_scope(), so its writes are committed together or rolled back
together. Key points:

- Sessions are short-lived, one per invocation
- Context managers guarantee commit/rollback and close
- Driver errors surface as StorageError, never as raw SQLAlchemy exceptions
"""

import logging
from collections.abc import Callable, Generator
from contextlib import contextmanager
from pathlib import Path
from typing import TypeVar

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import get_config
from ..errors import StorageError
from .schema import Base

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LedgerDatabase:
    """
    Owns the engine and session factory of the world-state database.

    Provides:
    - Lazily created engine (StaticPool for SQLite)
    - Session factory with explicit transactions
    - Schema creation and connection checks
    """

    def __init__(self, database_url: str | None = None, echo: bool | None = None):
        """
        Initialize the database manager.

        Args:
            database_url: SQLAlchemy database URL. If None, uses the configured one.
            echo: Log SQL statements. If None, uses the configured setting.
        """
        config = get_config()
        if database_url is None:
            database_url = config.get_database_url()
            if config.database_url is None:
                db_path = Path(config.database_path)
                db_path.parent.mkdir(exist_ok=True, parents=True)
                logger.info("Using SQLite world state at: %s", db_path)

        self.database_url = database_url
        self.echo = config.echo_sql if echo is None else echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            if self.database_url.startswith("sqlite"):
                self._engine = create_engine(
                    self.database_url,
                    # Single shared connection; also keeps :memory: databases alive
                    poolclass=StaticPool,
                    connect_args={"check_same_thread": False},
                    echo=self.echo,
                )
            else:
                self._engine = create_engine(
                    self.database_url,
                    pool_size=10,
                    max_overflow=20,
                    pool_pre_ping=True,
                    echo=self.echo,
                )

            logger.info("Database engine created: %s", self._engine.url)

        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autocommit=False,
                # World-state writes flush explicitly
                autoflush=False,
                expire_on_commit=False,
            )
        return self._session_factory

    def create_session(self) -> Session:
        """
        Create a new database session.

        Prefer session_scope(); a bare session must be closed by the caller.
        """
        return self.session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope for one ledger invocation.

        ```python
        with db.session_scope() as session:
            LibraryContract(SqlWorldState(session)).borrow_book(...)
        # Committed on success, rolled back if the block raised
        ```
        """
        session = self.create_session()
        try:
            yield session
            session.commit()
            logger.debug("World state transaction committed")
        except Exception:
            logger.debug("World state transaction rolled back")
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self, drop_existing: bool = False) -> None:
        """
        Create the world-state table.

        Args:
            drop_existing: If True, drop the table first
        """
        if drop_existing:
            logger.warning("Dropping existing world state...")
            Base.metadata.drop_all(bind=self.engine)

        Base.metadata.create_all(bind=self.engine)
        logger.info("World state schema ready")

    def verify_connection(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection verified")
            return True
        except SQLAlchemyError:
            logger.exception("Database connection failed")
            return False

    def close(self) -> None:
        """Dispose of the engine and its connections."""
        if self._engine:
            self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None


# Global database manager instance
_db_manager: LedgerDatabase | None = None


def get_db_manager(database_url: str | None = None) -> LedgerDatabase:
    """
    Get the global database manager instance.

    Args:
        database_url: Database URL (only used on first call)
    """
    global _db_manager  # noqa: PLW0603 - Singleton pattern for database manager

    if _db_manager is None:
        _db_manager = LedgerDatabase(database_url)

    return _db_manager


def reset_db_manager() -> None:
    """Dispose of and forget the global database manager (useful for testing)."""
    global _db_manager  # noqa: PLW0603

    if _db_manager is not None:
        _db_manager.close()
    _db_manager = None


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Convenience context manager around the global database manager."""
    with get_db_manager().session_scope() as session:
        yield session


def safe_state_call(call: Callable[[], T], error_msg: str, key: str | None = None) -> T:
    """
    Run a database call, translating driver failures into StorageError.

    Args:
        call: Function that performs the database work
        error_msg: Message prefix naming the failed operation
        key: World-state key involved, if any

    Raises:
        StorageError: If the call raises a SQLAlchemy error
    """
    try:
        return call()
    except SQLAlchemyError as e:
        logger.exception("World state call failed")
        raise StorageError(f"{error_msg}: {e!s}", key=key) from e
