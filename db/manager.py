"""Database manager for the Keesti SQLite category store."""

import sqlite3
from contextlib import contextmanager
from config import Config, get_migrations_dir


class DatabaseManager:
    """Opens connections to the category database.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        self.config = config

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Foreign keys are enforced so a category cannot point at a
        parent that does not exist.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self):
        return self.config.db_path

    def get_migrations_dir(self):
        return get_migrations_dir()
