"""
VOTECHAIN: Python SDK Client.

Small client for the VOTECHAIN REST API.

Usage:
    from votechain.client import VotechainClient

    with VotechainClient("http://localhost:3000") as client:
        client.vote("alice", "X")
        ledger = client.fetch_ledger()
        assert ledger.verify()
"""

from typing import Any

import httpx

from votechain.consensus.vote_ledger import VoteLedger
from votechain.exceptions import VotechainError


class VotechainAPIError(VotechainError):
    """Error response from a VOTECHAIN server."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"VOTECHAIN API error {status_code}: {detail}")


class VotechainClient:
    """Python SDK for the VOTECHAIN API.

    Args:
        base_url: API server URL (default: http://localhost:3000)
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests inject a mock one)
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = self._client.request(method, path, **kwargs)
        if resp.status_code >= 400:
            detail = (
                resp.json().get("detail", resp.text)
                if resp.headers.get("content-type", "").startswith("application/json")
                else resp.text
            )
            raise VotechainAPIError(resp.status_code, detail)
        return resp.json()

    # ─── Votes ────────────────────────────────────────────────────────

    def vote(self, voter_id: str, candidate: str) -> dict:
        """Cast a vote. Returns the sealed entry's index and hash."""
        return self._request(
            "POST", "/vote", json={"voter_id": voter_id, "candidate": candidate}
        )

    def results(self) -> list[dict]:
        return self._request("GET", "/results")

    def voters(self) -> list[dict]:
        return self._request("GET", "/voters")

    # ─── Ledger ───────────────────────────────────────────────────────

    def export_chain(self) -> dict:
        """Raw ``/blockchain`` export."""
        return self._request("GET", "/blockchain")

    def fetch_ledger(self) -> VoteLedger:
        """Download the chain and rebuild it locally for an independent audit."""
        return VoteLedger.from_export(self.export_chain())

    # ─── Context Manager ──────────────────────────────────────────────

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
