"""
Base database connection and initialization.

This module handles database connection management and schema initialization.
Optimized for SQLite concurrency with WAL mode and busy_timeout.

IMPORTANT: Database instantiation should be done through the DI layer.
Use core.dependencies.get_database() instead of instantiating directly.
"""
import sqlite3
import logging
from typing import Optional
from pathlib import Path

from core.config import DATABASE_PATH, DATABASE_BUSY_TIMEOUT

logger = logging.getLogger(__name__)


# Column names follow the legacy schema, including the "udatedat" spelling.
PATIENT_TABLE_DDL = """
    CREATE TABLE IF NOT EXISTS patient (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        phone TEXT NOT NULL DEFAULT '',
        discharge INTEGER NOT NULL DEFAULT 0,
        createdat TEXT NOT NULL,
        udatedat TEXT NOT NULL,
        bloodgroup TEXT NOT NULL DEFAULT '',
        description TEXT NOT NULL DEFAULT '',
        deletedat TEXT
    )
"""


class Database:
    """
    SQLite database connection manager.

    Features:
    - WAL mode for better concurrent read/write performance
    - Busy timeout to handle lock contention
    - Creates the patient table on first use

    Usage:
        # Via dependency injection (recommended):
        from core.dependencies import get_database
        db = get_database()

        # Direct instantiation (for testing):
        db = Database(db_path="/tmp/test.db")
    """

    def __init__(self, db_path: Optional[str] = None, busy_timeout: Optional[int] = None):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Defaults to config DATABASE_PATH.
            busy_timeout: SQLite busy timeout in milliseconds. Defaults to config value.
        """
        self.db_path = db_path or DATABASE_PATH
        self.busy_timeout = busy_timeout if busy_timeout is not None else DATABASE_BUSY_TIMEOUT

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _configure_connection(self, conn: sqlite3.Connection) -> None:
        conn.execute(f"PRAGMA busy_timeout = {int(self.busy_timeout)}")

    def _init_db(self) -> None:
        """Create the schema and enable WAL mode if not already enabled."""
        conn = sqlite3.connect(self.db_path)
        try:
            self._configure_connection(conn)
            cursor = conn.cursor()

            # WAL mode persists in the database file
            cursor.execute("PRAGMA journal_mode = WAL")
            result = cursor.fetchone()
            if result and result[0].lower() == 'wal':
                logger.info(f"SQLite WAL mode enabled for {self.db_path}")
            else:
                logger.warning(f"Failed to enable WAL mode, current mode: {result}")

            cursor.execute(PATIENT_TABLE_DDL)
            conn.commit()
        finally:
            conn.close()

        logger.info(
            f"Database initialized: {self.db_path} "
            f"(busy_timeout={self.busy_timeout}ms)"
        )

    def get_connection(self) -> sqlite3.Connection:
        """
        Get a new database connection with the busy timeout applied.

        Returns:
            sqlite3.Connection: A new connection; the caller closes it.
        """
        conn = sqlite3.connect(self.db_path)
        self._configure_connection(conn)
        return conn
