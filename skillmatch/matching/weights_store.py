"""SQLite persistence for learned weight vectors.

Every update is appended, so the table doubles as an audit trail of how
the weights drifted over time.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

from skillmatch.matching.aggregator import WeightVector

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS weight_vectors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    skill REAL NOT NULL,
    experience REAL NOT NULL,
    education REAL NOT NULL,
    reason TEXT,
    created_at TEXT NOT NULL
)
"""


class WeightStore:
    """Async SQLite store for weight vectors."""

    def __init__(self, db_path: Path | str):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None

    @asynccontextmanager
    async def _get_connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        if self._connection is None:
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        yield self._connection

    async def initialize(self) -> None:
        """Initialize the database, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        async with self._get_connection() as conn:
            await conn.execute(CREATE_TABLE_SQL)
            await conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    async def save(self, weights: WeightVector, reason: str | None = None) -> None:
        """Append a weight vector.

        Args:
            weights: The vector to persist.
            reason: Free-text note on what triggered the update.
        """
        async with self._get_connection() as conn:
            await conn.execute(
                """
                INSERT INTO weight_vectors (skill, experience, education, reason, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    weights.skill,
                    weights.experience,
                    weights.education,
                    reason,
                    datetime.now(UTC).isoformat(),
                ),
            )
            await conn.commit()

    async def load_latest(self) -> WeightVector | None:
        """Return the most recently saved vector, or None if none was saved."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM weight_vectors ORDER BY id DESC LIMIT 1"
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return self._row_to_weights(row)

    async def history(self) -> list[WeightVector]:
        """Return every saved vector, oldest first."""
        async with self._get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM weight_vectors ORDER BY id")
            rows = await cursor.fetchall()

        return [self._row_to_weights(row) for row in rows]

    def _row_to_weights(self, row: aiosqlite.Row) -> WeightVector:
        return WeightVector.normalized(row["skill"], row["experience"], row["education"])
