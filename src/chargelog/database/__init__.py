"""Database layer for chargelog application."""

from chargelog.database.base import Database
from chargelog.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
