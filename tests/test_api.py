"""
VOTECHAIN: API Tests.

Tests for the FastAPI REST API endpoints.
"""

import sqlite3

import pytest
from fastapi.testclient import TestClient

from votechain import config
from votechain.api import app
from votechain.exceptions import DuplicateVoterError
from votechain.voters import VoterStore


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = str(tmp_path / "voters.db")
    monkeypatch.setenv("VOTECHAIN_DB", path)
    config.reload()
    return path


@pytest.fixture
def client(db_path):
    """Test client with an isolated voter store and a fresh ledger."""
    with TestClient(app) as c:
        yield c


def vote(client, voter_id="alice", candidate="X"):
    return client.post("/vote", json={"voter_id": voter_id, "candidate": candidate})


class TestHealth:
    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["service"] == "votechain"

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"
        assert resp.json()["ledger_length"] == 1


class TestVote:
    def test_cast_vote(self, client):
        resp = vote(client)
        assert resp.status_code == 200, resp.json()
        body = resp.json()
        assert body["message"] == "Vote cast successfully for X!"
        assert body["index"] == 1

        chain = client.get("/blockchain").json()
        assert chain["length"] == 2
        assert chain["chain"][1]["hash"] == body["hash"]
        assert chain["chain"][1]["payload"] == {"voter_id": "alice", "candidate": "X"}
        assert chain["chain"][1]["prev_hash"] == chain["chain"][0]["hash"]

    def test_duplicate_voter(self, client):
        assert vote(client).status_code == 200
        resp = vote(client, candidate="Y")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "You have already voted!"
        assert client.get("/blockchain").json()["length"] == 2

    def test_fields_are_stripped(self, client):
        resp = vote(client, voter_id="  bob ", candidate=" Y ")
        assert resp.status_code == 200
        assert resp.json()["message"] == "Vote cast successfully for Y!"
        assert vote(client, voter_id="bob").status_code == 400

    @pytest.mark.parametrize("body", [
        {"voter_id": "", "candidate": "X"},
        {"voter_id": "alice", "candidate": "   "},
        {"voter_id": "alice"},
        {"candidate": "X"},
        {"voter_id": "a" * 201, "candidate": "X"},
    ])
    def test_invalid_body(self, client, body):
        resp = client.post("/vote", json=body)
        assert resp.status_code == 422
        assert client.get("/blockchain").json()["length"] == 1

    def test_persistence_failure_keeps_entry(self, client, monkeypatch):
        async def broken(self, entry):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(VoterStore, "record_vote", broken)
        resp = vote(client)
        assert resp.status_code == 500
        assert "persisted" in resp.json()["detail"]
        # Append-only: the sealed entry is not rolled back
        assert client.get("/blockchain").json()["length"] == 2
        assert client.get("/blockchain/verify").status_code == 200

    def test_duplicate_at_persistence_reports_sealed_entry(self, client, monkeypatch):
        async def already_recorded(self, entry):
            raise DuplicateVoterError(entry.payload["voter_id"])

        monkeypatch.setattr(VoterStore, "record_vote", already_recorded)
        resp = vote(client)
        assert resp.status_code == 409
        assert resp.json()["detail"] == (
            "Vote sealed as entry #1 but voter alice was already recorded"
        )
        assert client.get("/blockchain").json()["length"] == 2
        assert client.get("/blockchain/verify").status_code == 200


class TestVotersAndResults:
    def test_voters(self, client):
        vote(client, "alice", "X")
        vote(client, "bob", "Y")
        voters = client.get("/voters").json()
        assert [v["voter_id"] for v in voters] == ["alice", "bob"]
        chain = client.get("/blockchain").json()["chain"]
        assert voters[1]["block_hash"] == chain[2]["hash"]
        assert voters[1]["timestamp"] == chain[2]["timestamp"]

    def test_results(self, client):
        for voter, candidate in [("a", "X"), ("b", "Y"), ("c", "X")]:
            vote(client, voter, candidate)
        assert client.get("/results").json() == [
            {"candidate": "X", "count": 2},
            {"candidate": "Y", "count": 1},
        ]

    def test_results_empty(self, client):
        assert client.get("/results").json() == []


class TestLedger:
    def test_verify_fresh(self, client):
        resp = client.get("/blockchain/verify")
        assert resp.status_code == 200
        body = resp.json()
        assert body["valid"] is True
        assert body["entries_checked"] == 1
        assert body["violations"] == []

    def test_verify_after_votes(self, client):
        for voter in ["a", "b", "c"]:
            vote(client, voter)
        body = client.get("/blockchain/verify").json()
        assert body["valid"] is True
        assert body["entries_checked"] == 4

    def test_tampered_chain_conflict(self, client):
        for voter in ["a", "b", "c"]:
            vote(client, voter)
        entry = app.state.ledger.snapshot()[2]
        object.__setattr__(entry, "payload", {"voter_id": "b", "candidate": "Z"})

        resp = client.get("/blockchain/verify")
        assert resp.status_code == 409
        body = resp.json()
        assert body["valid"] is False
        assert body["violations"][0]["index"] == 2
        assert body["violations"][0]["type"] == "DATA_TAMPERING"

    def test_restart_resets_chain_not_voters(self, db_path):
        with TestClient(app) as c:
            vote(c, "alice")
            assert c.get("/blockchain").json()["length"] == 2

        with TestClient(app) as c:
            assert c.get("/blockchain").json()["length"] == 1
            assert vote(c, "alice").status_code == 400
            assert len(c.get("/voters").json()) == 1
