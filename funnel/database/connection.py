"""
Database connection management and schema initialization.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


class DatabaseConnection:
    """Manages database connection and schema."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def conn(self) -> Iterator[sqlite3.Connection]:
        """Get database connection with row factory."""
        connection = sqlite3.connect(self.db_path)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _init_schema(self):
        """Initialize database schema."""
        with self.conn() as connection:
            connection.executescript("""
                CREATE TABLE IF NOT EXISTS sources (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    type TEXT NOT NULL DEFAULT 'rss' CHECK(type IN ('rss')),
                    url TEXT NOT NULL,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    categories TEXT NOT NULL DEFAULT '[]',
                    owner TEXT,
                    last_fetched_at TIMESTAMP,
                    fetch_error TEXT,
                    created_at TIMESTAMP NOT NULL
                );

                CREATE TABLE IF NOT EXISTS content_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    content TEXT,
                    summary TEXT,
                    keywords TEXT NOT NULL DEFAULT '[]',
                    bullet_points TEXT NOT NULL DEFAULT '[]',
                    source_id INTEGER REFERENCES sources(id) ON DELETE SET NULL,
                    original_url TEXT UNIQUE NOT NULL,
                    publish_date TIMESTAMP,
                    priority TEXT NOT NULL DEFAULT 'medium'
                        CHECK(priority IN ('high', 'medium', 'low')),
                    is_processed INTEGER NOT NULL DEFAULT 0,
                    estimated_read_time INTEGER CHECK(estimated_read_time >= 0),
                    category TEXT,
                    philosophy_index REAL CHECK(philosophy_index BETWEEN 0 AND 10),
                    personal_index REAL CHECK(personal_index BETWEEN 0 AND 10),
                    history_index REAL CHECK(history_index BETWEEN 0 AND 10),
                    science_index REAL CHECK(science_index BETWEEN 0 AND 10),
                    ai_index REAL CHECK(ai_index BETWEEN 0 AND 10),
                    hidden INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_sources_active ON sources(is_active, type);
                CREATE INDEX IF NOT EXISTS idx_items_unprocessed ON content_items(is_processed, created_at);
                CREATE INDEX IF NOT EXISTS idx_items_publish ON content_items(publish_date DESC);
                CREATE INDEX IF NOT EXISTS idx_items_source ON content_items(source_id);
            """)
