"""
VOTECHAIN: Votes Router.
Vote casting, voter listing and result tallies.
"""

import asyncio
import logging
import sqlite3

from fastapi import APIRouter, Depends, HTTPException

from votechain.api_deps import get_ledger, get_vote_lock, get_voter_store
from votechain.consensus.vote_ledger import VoteLedger
from votechain.exceptions import DuplicateVoterError
from votechain.models import ResultResponse, VoteRequest, VoteResponse, VoterResponse
from votechain.voters import VoterStore

logger = logging.getLogger("votechain.api.votes")
router = APIRouter(tags=["votes"])


@router.post("/vote", response_model=VoteResponse)
async def cast_vote(
    req: VoteRequest,
    ledger: VoteLedger = Depends(get_ledger),
    voter_store: VoterStore = Depends(get_voter_store),
    vote_lock: asyncio.Lock = Depends(get_vote_lock),
) -> VoteResponse:
    """Seal a vote into the ledger, once per voter."""
    async with vote_lock:
        if await voter_store.has_voted(req.voter_id):
            logger.warning("Duplicate vote rejected for voter %s", req.voter_id)
            raise HTTPException(status_code=400, detail="You have already voted!")

        entry = ledger.append({"voter_id": req.voter_id, "candidate": req.candidate})

        try:
            await voter_store.record_vote(entry)
        except DuplicateVoterError as e:
            # Recorded by another writer after the check; the entry stays sealed
            logger.error(
                "Entry #%d sealed but voter %s was already recorded", entry.index, e.voter_id
            )
            raise HTTPException(
                status_code=409,
                detail=f"Vote sealed as entry #{entry.index} but voter {e.voter_id} "
                "was already recorded",
            ) from e
        except (sqlite3.Error, OSError) as e:
            # The entry stays sealed: the chain is append-only
            logger.error("Entry #%d sealed but not persisted: %s", entry.index, e)
            raise HTTPException(
                status_code=500, detail="Vote sealed but could not be persisted"
            ) from e

    logger.info("Vote sealed: entry #%d | hash %s...", entry.index, entry.hash[:8])
    return VoteResponse(
        message=f"Vote cast successfully for {req.candidate}!",
        index=entry.index,
        hash=entry.hash,
    )


@router.get("/voters", response_model=list[VoterResponse])
async def list_voters(
    voter_store: VoterStore = Depends(get_voter_store),
) -> list[VoterResponse]:
    """List every recorded vote."""
    records = await voter_store.list_voters()
    return [VoterResponse(**r.to_dict()) for r in records]


@router.get("/results", response_model=list[ResultResponse])
async def get_results(
    voter_store: VoterStore = Depends(get_voter_store),
) -> list[ResultResponse]:
    """Vote counts per candidate."""
    tally = await voter_store.tally()
    return [ResultResponse(candidate=c, count=n) for c, n in tally]
