"""SQLite schema migrations.

Migrations are applied in order and tracked through ``PRAGMA user_version``
so running ``migrate`` repeatedly is safe.
"""
from __future__ import annotations

import logging
import os
import sqlite3
from typing import Sequence, Tuple

logger = logging.getLogger(__name__)

MIGRATIONS: Sequence[Tuple[int, str]] = (
    (
        1,
        """
CREATE TABLE IF NOT EXISTS kv_store (
  key TEXT PRIMARY KEY,
  value TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    ),
)


def schema_version(conn: sqlite3.Connection) -> int:
    return int(conn.execute("PRAGMA user_version").fetchone()[0])


def migrate(db_path: str = "data/mockmatch.db") -> int:
    """Bring the database at ``db_path`` up to the latest schema; return its version."""

    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        current = schema_version(conn)
        for version, statement in MIGRATIONS:
            if version <= current:
                continue
            conn.execute(statement)
            conn.execute(f"PRAGMA user_version = {int(version)}")
            conn.commit()
            logger.info("Applied migration %d to %s", version, db_path)
            current = version
        return current
    finally:
        conn.close()


if __name__ == "__main__":
    from config.settings import settings

    print(f"{settings.DB_PATH} at schema version {migrate(settings.DB_PATH)}")
