"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from chargelog.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "CHARGELOG_DB_PATH"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks CHARGELOG_DB_PATH
            environment variable, then defaults to ~/.chargelog/chargelog.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        # Default to ~/.chargelog/chargelog.db
        home = Path.home()
        db_dir = home / ".chargelog"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "chargelog.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
