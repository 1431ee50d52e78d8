"""
VOTECHAIN: Immutable Vote Ledger.

Tamper-evident vote storage through SHA-256 hash chaining. Every entry
commits to its own content and to the hash of its predecessor, so any
retroactive edit breaks either the entry's self-certification or the
link held by its successor.

The chain lives in process memory only. Durable records of accepted
votes are the voter store's job (see ``votechain.voters``).
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Iterator

from votechain.canonical import (
    GENESIS_PREV_HASH,
    canonical_json,
    compute_entry_hash,
    freeze,
    thaw,
)
from votechain.consensus.merkle import compute_merkle_root
from votechain.exceptions import SerializationError

GENESIS_PAYLOAD = "Genesis Block"

# Violation types
DATA_TAMPERING = "DATA_TAMPERING"
CHAIN_BREAK = "CHAIN_BREAK"
INDEX_GAP = "INDEX_GAP"
GENESIS_MISMATCH = "GENESIS_MISMATCH"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Entry:
    """One sealed vote in the chain.

    The raw constructor restores stored values verbatim (nothing is
    recomputed); use :meth:`create` to seal new content. The payload is
    held as a deep read-only copy, so entries handed out by the ledger
    cannot be edited through ``entry.payload``.
    """

    index: int
    timestamp: str
    payload: Any
    prev_hash: str
    hash: str

    def __post_init__(self):
        object.__setattr__(self, "payload", freeze(self.payload))

    @classmethod
    def create(cls, index: int, timestamp: str, payload: Any, prev_hash: str) -> Entry:
        """Seal a new entry, hashing its canonical form.

        The stored payload is decoded from the canonical JSON and frozen,
        so the caller's object is never aliased by the chain.

        Raises:
            SerializationError: If ``payload`` has no canonical JSON form.
        """
        payload_json = canonical_json(payload)
        return cls(
            index=index,
            timestamp=timestamp,
            payload=json.loads(payload_json),
            prev_hash=prev_hash,
            hash=compute_entry_hash(index, timestamp, payload_json, prev_hash),
        )

    def compute_hash(self) -> str:
        """Recompute the hash from the entry's current fields. Pure."""
        return compute_entry_hash(
            self.index, self.timestamp, canonical_json(self.payload), self.prev_hash
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "timestamp": self.timestamp,
            "payload": thaw(self.payload),
            "prev_hash": self.prev_hash,
            "hash": self.hash,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entry:
        """Restore an exported entry exactly as stored."""
        if not isinstance(data, dict):
            raise ValueError(f"Entry export must be an object, got {type(data).__name__}")
        try:
            return cls(
                index=data["index"],
                timestamp=data["timestamp"],
                payload=data["payload"],
                prev_hash=data["prev_hash"],
                hash=data["hash"],
            )
        except KeyError as e:
            raise ValueError(f"Entry export is missing field {e.args[0]!r}") from e


@dataclass(frozen=True)
class IntegrityViolation:
    """A single mismatch found while auditing the chain."""

    index: int
    type: str
    expected: Any
    actual: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "type": self.type,
            "expected": thaw(self.expected),
            "actual": thaw(self.actual),
        }


@dataclass
class IntegrityReport:
    valid: bool
    entries_checked: int
    merkle_root: str
    violations: list[IntegrityViolation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "entries_checked": self.entries_checked,
            "merkle_root": self.merkle_root,
            "violations": [v.to_dict() for v in self.violations],
        }


class VoteLedger:
    """
    Append-only, hash-linked sequence of vote entries.

    Index 0 is always the genesis entry. ``append`` is the only mutation;
    it runs under a single lock so concurrent callers can never link two
    entries to the same predecessor. Readers work on an immutable tuple
    view and never observe a half-built entry.

    ``verify()`` stops at the first violation. ``audit()`` walks the
    whole chain and reports every violation it finds.
    """

    def __init__(self, clock: Callable[[], str] | None = None):
        self._clock = clock or utc_now
        self._lock = threading.Lock()
        self._entries: list[Entry] = [self.create_genesis()]

    @classmethod
    def from_entries(
        cls, entries: Iterable[Entry], clock: Callable[[], str] | None = None
    ) -> VoteLedger:
        """Rebuild a ledger from exported entries, trusted as stored.

        Nothing is re-linked or re-hashed, so ``verify()`` on the result
        reports any tampering that happened to the export.
        """
        restored = list(entries)
        if not restored:
            raise ValueError("A ledger needs at least the genesis entry")
        ledger = cls(clock)
        ledger._entries = restored
        return ledger

    @classmethod
    def from_export(cls, data: dict[str, Any] | list[dict[str, Any]]) -> VoteLedger:
        """Load the ``{"chain": [...]}`` export or a bare list of entries."""
        if isinstance(data, dict):
            if "chain" not in data:
                raise ValueError("Export object has no 'chain' field")
            data = data["chain"]
        if not isinstance(data, list):
            raise ValueError("Chain export must be a list of entries")
        return cls.from_entries(Entry.from_dict(item) for item in data)

    # ─── Core operations ─────────────────────────────────────────

    def create_genesis(self) -> Entry:
        return Entry.create(0, self._clock(), GENESIS_PAYLOAD, GENESIS_PREV_HASH)

    def latest(self) -> Entry:
        with self._lock:
            return self._entries[-1]

    def append(self, payload: Any) -> Entry:
        """Seal ``payload`` into a new entry linked to the current tail.

        Raises:
            SerializationError: If ``payload`` cannot be canonically
                serialized. The ledger is left unchanged.
        """
        with self._lock:
            tail = self._entries[-1]
            entry = Entry.create(tail.index + 1, self._clock(), payload, tail.hash)
            self._entries.append(entry)
        return entry

    def snapshot(self) -> tuple[Entry, ...]:
        with self._lock:
            return tuple(self._entries)

    def verify(self) -> bool:
        """True when the whole chain is intact. Stops at the first violation."""
        return next(self._iter_violations(self.snapshot()), None) is None

    def audit(self) -> IntegrityReport:
        """Check the whole chain and collect every violation, in chain order."""
        entries = self.snapshot()
        violations = list(self._iter_violations(entries))
        return IntegrityReport(
            valid=not violations,
            entries_checked=len(entries),
            merkle_root=compute_merkle_root([e.hash for e in entries]),
            violations=violations,
        )

    def to_dict(self) -> dict[str, Any]:
        entries = self.snapshot()
        return {"chain": [e.to_dict() for e in entries], "length": len(entries)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ─── Verification ────────────────────────────────────────────

    @staticmethod
    def _recompute(entry: Entry) -> str | None:
        # A payload swapped for a non-JSON value cannot match any hash
        try:
            return entry.compute_hash()
        except SerializationError:
            return None

    def _iter_violations(self, entries: tuple[Entry, ...]) -> Iterator[IntegrityViolation]:
        genesis = entries[0]
        actual = self._recompute(genesis)
        if actual != genesis.hash:
            yield IntegrityViolation(0, DATA_TAMPERING, genesis.hash, actual)
        if genesis.index != 0:
            yield IntegrityViolation(0, GENESIS_MISMATCH, 0, genesis.index)
        if genesis.prev_hash != GENESIS_PREV_HASH:
            yield IntegrityViolation(0, GENESIS_MISMATCH, GENESIS_PREV_HASH, genesis.prev_hash)
        if genesis.payload != GENESIS_PAYLOAD:
            yield IntegrityViolation(0, GENESIS_MISMATCH, GENESIS_PAYLOAD, genesis.payload)

        for i in range(1, len(entries)):
            current, previous = entries[i], entries[i - 1]

            actual = self._recompute(current)
            if actual != current.hash:
                yield IntegrityViolation(i, DATA_TAMPERING, current.hash, actual)

            if current.prev_hash != previous.hash:
                yield IntegrityViolation(i, CHAIN_BREAK, previous.hash, current.prev_hash)

            if current.index != i:
                yield IntegrityViolation(i, INDEX_GAP, i, current.index)
