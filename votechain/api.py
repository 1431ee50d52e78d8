"""
VOTECHAIN: REST API.

FastAPI server exposing the vote ledger.
Main entry point for initialization and routing.
"""

import asyncio
import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from votechain import __version__, config
from votechain.consensus.vote_ledger import VoteLedger
from votechain.exceptions import LedgerIntegrityError, SerializationError
from votechain.routes import ledger as ledger_router
from votechain.routes import votes as votes_router
from votechain.voters import VoterStore

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the process ledger and voter store on startup."""
    db_path = config.DB_PATH  # Read at runtime, not import time
    logger.info("Starting lifespan with DB_PATH: %s", db_path)

    voter_store = VoterStore(db_path)
    await voter_store.init_db()

    app.state.ledger = VoteLedger()
    app.state.voter_store = voter_store
    app.state.vote_lock = asyncio.Lock()

    try:
        yield
    finally:
        # The chain is process-scoped and dies with the app
        app.state.ledger = None
        app.state.voter_store = None
        app.state.vote_lock = None


app = FastAPI(
    title="VOTECHAIN Vote Ledger API",
    description="Tamper-evident vote recording on a hash-linked ledger.",
    version=__version__,
    lifespan=lifespan,
)


# ─── Middleware ──────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# ─── Exception Handlers ──────────────────────────────────────────────


@app.exception_handler(SerializationError)
async def serialization_error_handler(request: Request, exc: SerializationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(LedgerIntegrityError)
async def integrity_error_handler(request: Request, exc: LedgerIntegrityError) -> JSONResponse:
    logger.error("Ledger integrity violation: %s", exc.report.to_dict()["violations"])
    return JSONResponse(status_code=409, content={"detail": str(exc), **exc.report.to_dict()})


@app.exception_handler(sqlite3.Error)
async def sqlite_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.error("Database error: %s", exc)
    return JSONResponse(status_code=500, content={"detail": "Internal database error"})


@app.exception_handler(Exception)
async def universal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "An unexpected server error occurred."})


# ─── Routes ──────────────────────────────────────────────────────────


@app.get("/", tags=["health"])
async def root_node() -> dict:
    return {
        "service": "votechain",
        "version": __version__,
        "status": "operational",
    }


@app.get("/health", tags=["health"])
async def health_check(request: Request) -> dict:
    """Simple status check for load balancers."""
    ledger = getattr(request.app.state, "ledger", None)
    return {
        "status": "healthy",
        "ledger_length": len(ledger) if ledger is not None else 0,
        "version": __version__,
    }


app.include_router(votes_router.router)
app.include_router(ledger_router.router)
