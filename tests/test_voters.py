"""Tests for the SQLite voter store."""

import sqlite3

import pytest

from votechain.consensus.vote_ledger import VoteLedger
from votechain.exceptions import DuplicateVoterError
from votechain.voters import VoterRecord, VoterStore


@pytest.fixture
async def store(tmp_path):
    s = VoterStore(tmp_path / "nested" / "voters.db")
    await s.init_db()
    return s


@pytest.fixture
def ledger(fixed_clock):
    return VoteLedger(clock=fixed_clock)


@pytest.mark.asyncio
async def test_init_db_idempotent(store):
    await store.init_db()
    assert await store.list_voters() == []


@pytest.mark.asyncio
async def test_record_and_check(store, ledger):
    assert await store.has_voted("alice") is False
    entry = ledger.append({"voter_id": "alice", "candidate": "X"})

    record = await store.record_vote(entry)

    assert record == VoterRecord("alice", "X", entry.timestamp, entry.hash)
    assert await store.has_voted("alice") is True
    assert await store.has_voted("bob") is False


@pytest.mark.asyncio
async def test_duplicate_rejected(store, ledger):
    await store.record_vote(ledger.append({"voter_id": "alice", "candidate": "X"}))
    with pytest.raises(DuplicateVoterError) as exc_info:
        await store.record_vote(ledger.append({"voter_id": "alice", "candidate": "Y"}))
    assert exc_info.value.voter_id == "alice"
    assert len(await store.list_voters()) == 1


@pytest.mark.asyncio
async def test_list_voters_in_vote_order(store, ledger):
    for voter, candidate in [("carol", "Y"), ("alice", "X"), ("bob", "X")]:
        await store.record_vote(ledger.append({"voter_id": voter, "candidate": candidate}))

    voters = await store.list_voters()
    assert [v.voter_id for v in voters] == ["carol", "alice", "bob"]
    assert voters[0].to_dict() == {
        "voter_id": "carol",
        "candidate": "Y",
        "timestamp": ledger.snapshot()[1].timestamp,
        "block_hash": ledger.snapshot()[1].hash,
    }


@pytest.mark.asyncio
async def test_tally(store, ledger):
    for voter, candidate in [("a", "Y"), ("b", "X"), ("c", "X"), ("d", "Z"), ("e", "Y"), ("f", "X")]:
        await store.record_vote(ledger.append({"voter_id": voter, "candidate": candidate}))

    assert await store.tally() == [("X", 3), ("Y", 2), ("Z", 1)]


@pytest.mark.asyncio
async def test_tally_empty(store):
    assert await store.tally() == []


@pytest.mark.asyncio
async def test_persisted_across_store_instances(store, ledger):
    await store.record_vote(ledger.append({"voter_id": "alice", "candidate": "X"}))
    reopened = VoterStore(store.db_path)
    assert await reopened.has_voted("alice") is True


@pytest.mark.asyncio
async def test_schema_enforces_unique_voter(store):
    conn = sqlite3.connect(store.db_path)
    try:
        conn.execute("INSERT INTO voters VALUES ('x', 'X', 't', 'h')")
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO voters VALUES ('x', 'Y', 't', 'h')")
    finally:
        conn.close()
