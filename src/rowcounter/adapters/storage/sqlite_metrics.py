"""SQLite storage adapter for published row counts."""

import asyncio
import json
from collections.abc import AsyncIterable, Iterable, Sequence

import aiosqlite

from rowcounter.core.metrics import GROUP_LABEL
from rowcounter.core.models import MetricSample

_SAMPLES_SCHEMA = """
CREATE TABLE IF NOT EXISTS samples (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    metric_group TEXT NOT NULL DEFAULT '',
    name TEXT NOT NULL,
    timestamp REAL NOT NULL,
    value REAL NOT NULL,
    labels TEXT NOT NULL DEFAULT '{}'
);
CREATE INDEX IF NOT EXISTS idx_samples_timestamp ON samples(timestamp);
"""

_INSERT_SAMPLE = """
INSERT INTO samples (metric_group, name, timestamp, value, labels) VALUES (?, ?, ?, ?, ?)
"""

_SELECT_SAMPLES_SINCE = """
SELECT name, timestamp, value, labels FROM samples
WHERE timestamp > ?
ORDER BY timestamp ASC, id ASC
"""


def _row_params(sample: MetricSample) -> tuple[str, str, float, float, str]:
    return (
        sample.labels.get(GROUP_LABEL, ""),
        sample.name,
        sample.timestamp,
        sample.value,
        json.dumps(sample.labels, sort_keys=True),
    )


def _to_samples(rows: Iterable[tuple]) -> list[MetricSample]:
    return [
        MetricSample(name=row[0], timestamp=row[1], value=row[2], labels=json.loads(row[3]))
        for row in rows
    ]


class SQLiteMetricsStorage:
    """SQLite implementation of MetricsStoragePort.

    Keeps published samples in a ``samples`` table using aiosqlite. Uses
    WAL mode so a dashboard can read while the probe writes.

    For :memory: databases a persistent connection is maintained since
    in-memory databases are connection-scoped in SQLite.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._initialized = False
        self._init_lock: asyncio.Lock | None = None
        self._persistent_conn: aiosqlite.Connection | None = None

    @property
    def _in_memory(self) -> bool:
        return self._db_path == ":memory:"

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the initialization lock (lazy to avoid event loop issues)."""
        if self._init_lock is None:
            self._init_lock = asyncio.Lock()
        return self._init_lock

    async def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        async with self._get_lock():
            if self._initialized:
                return
            if self._in_memory:
                self._persistent_conn = await aiosqlite.connect(":memory:")
                await self._persistent_conn.executescript(_SAMPLES_SCHEMA)
            else:
                async with aiosqlite.connect(self._db_path) as db:
                    await db.execute("PRAGMA journal_mode=WAL")
                    await db.executescript(_SAMPLES_SCHEMA)
            self._initialized = True

    async def _get_connection(self) -> aiosqlite.Connection:
        await self._ensure_initialized()
        if self._in_memory:
            if self._persistent_conn is None:
                raise RuntimeError("Memory database connection not initialized")
            return self._persistent_conn
        return await aiosqlite.connect(self._db_path)

    async def _release(self, db: aiosqlite.Connection) -> None:
        if not self._in_memory:
            await db.close()

    async def write_many(self, samples: Sequence[MetricSample]) -> None:
        """Insert all samples in one transaction; on failure none are kept."""
        params = [_row_params(sample) for sample in samples]
        db = await self._get_connection()
        try:
            try:
                await db.executemany(_INSERT_SAMPLE, params)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        finally:
            await self._release(db)

    async def read(self, since: float = 0) -> AsyncIterable[MetricSample]:
        """Read samples with timestamp > since, oldest first."""
        db = await self._get_connection()
        try:
            async with db.execute(_SELECT_SAMPLES_SINCE, (since,)) as cursor:
                rows = await cursor.fetchall()
        finally:
            await self._release(db)
        for sample in _to_samples(rows):
            yield sample

    async def close(self) -> None:
        """Close the persistent connection (for :memory: databases)."""
        if self._persistent_conn is not None:
            await self._persistent_conn.close()
            self._persistent_conn = None
            self._initialized = False
