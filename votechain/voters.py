"""
VOTECHAIN: Voter Store.

Durable registry of who has voted, kept in SQLite. The request layer
asks it whether a voter has already voted before appending to the
ledger, and hands it every accepted entry afterwards so the vote
survives a restart even though the chain does not.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import asdict, dataclass
from pathlib import Path

import aiosqlite

from votechain.consensus.vote_ledger import Entry
from votechain.exceptions import DuplicateVoterError

logger = logging.getLogger("votechain.voters")

VOTERS_SCHEMA = """
CREATE TABLE IF NOT EXISTS voters (
    voter_id    TEXT PRIMARY KEY,
    candidate   TEXT NOT NULL,
    timestamp   TEXT NOT NULL,
    block_hash  TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_voters_candidate ON voters(candidate);
"""


@dataclass
class VoterRecord:
    voter_id: str
    candidate: str
    timestamp: str
    block_hash: str

    def to_dict(self) -> dict:
        return asdict(self)


class VoterStore:
    """SQLite-backed voter registry.

    Each call opens its own short-lived connection, so one store can be
    shared by every request handler of the process.
    """

    def __init__(self, db_path: str):
        self.db_path = str(db_path)

    async def init_db(self) -> None:
        """Create the schema if it does not exist yet."""
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(self.db_path) as conn:
            await conn.executescript(VOTERS_SCHEMA)
            await conn.commit()
        logger.debug("Voter store ready at %s", self.db_path)

    async def has_voted(self, voter_id: str) -> bool:
        async with aiosqlite.connect(self.db_path) as conn:
            cursor = await conn.execute(
                "SELECT 1 FROM voters WHERE voter_id = ? LIMIT 1", (voter_id,)
            )
            return await cursor.fetchone() is not None

    async def record_vote(self, entry: Entry) -> VoterRecord:
        """Persist the vote sealed in ``entry``.

        Raises:
            DuplicateVoterError: If the voter id is already stored.
        """
        record = VoterRecord(
            voter_id=entry.payload["voter_id"],
            candidate=entry.payload["candidate"],
            timestamp=entry.timestamp,
            block_hash=entry.hash,
        )
        async with aiosqlite.connect(self.db_path) as conn:
            try:
                await conn.execute(
                    "INSERT INTO voters (voter_id, candidate, timestamp, block_hash) "
                    "VALUES (?, ?, ?, ?)",
                    (record.voter_id, record.candidate, record.timestamp, record.block_hash),
                )
                await conn.commit()
            except sqlite3.IntegrityError as e:
                raise DuplicateVoterError(record.voter_id) from e

        logger.info("Vote persisted: voter %s | entry #%d", record.voter_id, entry.index)
        return record

    async def list_voters(self) -> list[VoterRecord]:
        async with aiosqlite.connect(self.db_path) as conn:
            cursor = await conn.execute(
                "SELECT voter_id, candidate, timestamp, block_hash FROM voters "
                "ORDER BY timestamp, voter_id"
            )
            rows = await cursor.fetchall()
        return [VoterRecord(*row) for row in rows]

    async def tally(self) -> list[tuple[str, int]]:
        """Votes per candidate, most voted first (ties by name)."""
        async with aiosqlite.connect(self.db_path) as conn:
            cursor = await conn.execute(
                "SELECT candidate, COUNT(*) AS votes FROM voters "
                "GROUP BY candidate ORDER BY votes DESC, candidate ASC"
            )
            rows = await cursor.fetchall()
        return [(candidate, count) for candidate, count in rows]
