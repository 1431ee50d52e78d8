"""
VOTECHAIN: Ledger Router.
Chain export and cryptographic integrity verification.
"""

import logging

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from votechain.api_deps import get_ledger
from votechain.consensus.vote_ledger import VoteLedger
from votechain.exceptions import LedgerIntegrityError
from votechain.models import ChainResponse, LedgerReportResponse

logger = logging.getLogger("votechain.api.ledger")
router = APIRouter(prefix="/blockchain", tags=["ledger"])


@router.get("", response_model=ChainResponse)
async def get_chain(ledger: VoteLedger = Depends(get_ledger)) -> ChainResponse:
    """Export the full chain, genesis first."""
    return ChainResponse(**ledger.to_dict())


@router.get("/verify", response_model=LedgerReportResponse)
async def verify_chain(ledger: VoteLedger = Depends(get_ledger)) -> LedgerReportResponse:
    """Audit the chain. Responds 409 with the report when it is broken."""
    report = await run_in_threadpool(ledger.audit)
    if not report.valid:
        raise LedgerIntegrityError(report)
    return LedgerReportResponse(**report.to_dict())
