"""
VOTECHAIN: API Models.
Centralized Pydantic models for request/response validation.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class VoteRequest(BaseModel):
    voter_id: str = Field(..., max_length=200, description="Identity token of the voter")
    candidate: str = Field(..., max_length=200, description="Selected option")

    @field_validator("voter_id", "candidate")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Must not be empty or whitespace only")
        return v.strip()


class VoteResponse(BaseModel):
    message: str
    index: int
    hash: str


class EntryModel(BaseModel):
    index: int
    timestamp: str
    payload: Any
    prev_hash: str
    hash: str


class ChainResponse(BaseModel):
    chain: list[EntryModel]
    length: int


class ViolationModel(BaseModel):
    index: int
    type: str
    expected: Any = None
    actual: Any = None


class LedgerReportResponse(BaseModel):
    valid: bool
    entries_checked: int
    merkle_root: str
    violations: list[ViolationModel] = Field(default_factory=list)


class VoterResponse(BaseModel):
    voter_id: str
    candidate: str
    timestamp: str
    block_hash: str


class ResultResponse(BaseModel):
    candidate: str
    count: int
