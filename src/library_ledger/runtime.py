"""
Invocation runtime for the SQL-backed ledger.

Plays the host's part for a single process: every invocation gets a fresh
session, a SqlWorldState over it and a LibraryContract over that, and the
session commits only if the invocation returns normally.
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager

from .config import LedgerConfig, configure_logging, get_config
from .contract import LibraryContract
from .world_state import LedgerDatabase, SqlWorldState, get_db_manager

logger = logging.getLogger(__name__)


@contextmanager
def ledger_transaction(db: LedgerDatabase | None = None) -> Generator[LibraryContract, None, None]:
    """
    Run one ledger invocation as one database transaction.

    ```python
    with ledger_transaction() as contract:
        contract.borrow_book("record1", "book1", "alice", Timestamp.now())
    ```

    If the block raises, none of its writes are kept.
    """
    db = db or get_db_manager()
    with db.session_scope() as session:
        yield LibraryContract(SqlWorldState(session))


def bootstrap(config: LedgerConfig | None = None) -> LedgerDatabase:
    """
    Prepare the ledger for use.

    Configures logging, creates the world-state schema and, when
    ``seed_catalog`` is set, writes the starter catalog.

    Returns:
        The global database manager
    """
    config = config or get_config()
    configure_logging(config)

    db = get_db_manager(config.get_database_url())
    db.init_database()

    if config.seed_catalog:
        with ledger_transaction(db) as contract:
            contract.init_ledger()

    logger.info("Ledger %s ready at %s", config.ledger_name, db.database_url)
    return db
