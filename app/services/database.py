"""SQLite store handle which owns connection setup, transactions and schema creation."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from app.services.schema import SCHEMA_SQL

logger = logging.getLogger(__name__)


class DatabaseService:
    def __init__(self, db_path: Path):
        self._db_path = db_path
        logger.info("DatabaseService initialized with %s", db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    @contextmanager
    def connect(self):
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        conn.execute("PRAGMA journal_mode=WAL")
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self):
        """Yield a connection inside ``BEGIN IMMEDIATE``; commit on success, roll back on error."""
        with self.connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except Exception:
                conn.rollback()
                raise
            conn.commit()

    def init_schema(self) -> None:
        with self.connect() as conn:
            conn.executescript(SCHEMA_SQL)
        logger.info("Schema ensured at %s", self._db_path)

    def health_check(self) -> bool:
        try:
            with self.connect() as conn:
                conn.execute("SELECT 1")
            return True
        except Exception:
            logger.exception("Database health check failed")
            return False
