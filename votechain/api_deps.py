"""
VOTECHAIN: API Dependencies.
Shared dependencies for FastAPI routes.
"""

from __future__ import annotations

import asyncio

from fastapi import Request

from votechain.consensus.vote_ledger import VoteLedger
from votechain.voters import VoterStore


def get_ledger(request: Request) -> VoteLedger:
    """Inject the process ledger from app state."""
    return request.app.state.ledger


def get_voter_store(request: Request) -> VoterStore:
    """Inject the voter registry from app state."""
    return request.app.state.voter_store


def get_vote_lock(request: Request) -> asyncio.Lock:
    """Lock serializing duplicate check, append and persistence."""
    return request.app.state.vote_lock
