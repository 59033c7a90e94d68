"""Database factory functions."""

import logging
import os
from pathlib import Path
from typing import Optional

from ledgerbook.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV_VAR = "LEDGERBOOK_DB_PATH"
DEFAULT_DB_DIR = Path("~/.ledgerbook")
DEFAULT_DB_NAME = "ledgerbook.db"


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the ledger file: explicit path, then LEDGERBOOK_DB_PATH, then the default.

    The parent directory is created if missing.
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV_VAR)

    if database_path is None:
        path = DEFAULT_DB_DIR.expanduser() / DEFAULT_DB_NAME
    else:
        path = Path(database_path).expanduser()

    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite-backed ledger.

    Args:
        database_path: Path to the SQLite file. See ``resolve_database_path``
            for the fallbacks when omitted.

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = resolve_database_path(database_path)
    logger.debug("Opening ledger at %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")
