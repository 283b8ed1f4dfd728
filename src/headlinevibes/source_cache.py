"""SQLite-backed cache of friendly source names → provider source URIs."""

from __future__ import annotations

import logging
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from headlinevibes.models import SourceCacheEntry

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS source_uris (
    slug       TEXT PRIMARY KEY,
    uri        TEXT NOT NULL,
    title      TEXT NOT NULL DEFAULT '',
    updated_at TEXT NOT NULL
);
"""


class SourceCache:
    """Cache entries never expire; a stale URI is an accepted risk."""

    def __init__(self, db_path: Path) -> None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db_path = db_path
        self._init_db()

    # ── public ──────────────────────────────────────────────────────────

    def get(self, slug: str) -> SourceCacheEntry | None:
        con = self._connect()
        try:
            row = con.execute(
                "SELECT uri, title, updated_at FROM source_uris WHERE slug = ?", (slug,)
            ).fetchone()
        finally:
            con.close()
        if row is None:
            return None
        return SourceCacheEntry(
            uri=row[0], title=row[1], updated_at=datetime.fromisoformat(row[2])
        )

    def put(self, slug: str, uri: str, title: str) -> SourceCacheEntry:
        """Insert or replace the entry for *slug*."""
        entry = SourceCacheEntry(uri=uri, title=title, updated_at=datetime.now(UTC))
        con = self._connect()
        try:
            con.execute(
                """
                INSERT OR REPLACE INTO source_uris (slug, uri, title, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                (slug, entry.uri, entry.title, entry.updated_at.isoformat()),
            )
            con.commit()
        finally:
            con.close()
        logger.debug("Cached source %s -> %s", slug, uri)
        return entry

    # ── private ─────────────────────────────────────────────────────────

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self._db_path))

    def _init_db(self) -> None:
        con = self._connect()
        try:
            con.executescript(_SCHEMA)
        finally:
            con.close()
