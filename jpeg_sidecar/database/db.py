"""
Database connection management.
"""
import sqlite3
import logging
from pathlib import Path
from typing import Optional

from .schema import init_schema

class DBManager:
    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None

    def connect(self) -> sqlite3.Connection:
        """
        Connects to the SQLite catalog and makes sure the schema exists.
        """
        if self._conn:
            return self._conn

        logging.info(f"Connecting to catalog: {self.db_path}")
        self._conn = sqlite3.connect(self.db_path)

        # Single writer; records are committed per batch
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")

        init_schema(self._conn)

        return self._conn

    def close(self):
        if self._conn:
            self._conn.commit()
            self._conn.close()
            self._conn = None
