"""VOTECHAIN: Canonical Hash Construction.

Provides deterministic JSON serialization and null-byte separated
hash computation for ledger entries. Two logically identical payloads
always produce the same bytes, so a verification pass run today
reproduces the hash computed at append time.

Hash scheme:
    f"{index}\\x00{timestamp}\\x00{canonical_payload}\\x00{prev_hash}"
"""

from __future__ import annotations

import hashlib
import json
from types import MappingProxyType
from typing import Any

from votechain.exceptions import SerializationError

# ─── Canonical JSON ───────────────────────────────────────────────


def canonical_json(obj: Any) -> str:
    """Deterministic JSON: sorted keys, no whitespace, ASCII-safe.

    Guarantees identical output for semantically identical input
    regardless of Python dict insertion order. Unlike a ``default=str``
    dump, values with no JSON form are rejected instead of being
    stringified, and NaN/Infinity are refused.

    Args:
        obj: Any JSON-serializable object.

    Returns:
        Canonical JSON string.

    Raises:
        SerializationError: If ``obj`` has no canonical JSON form.
    """
    try:
        return json.dumps(
            obj, sort_keys=True, separators=(",", ":"),
            ensure_ascii=True, allow_nan=False, default=_frozen_default,
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Payload is not canonically serializable: {e}") from e


def _frozen_default(obj: Any) -> Any:
    if isinstance(obj, MappingProxyType):
        return dict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def freeze(obj: Any) -> Any:
    """Deep read-only copy of a JSON value: dicts become mapping proxies,
    lists become tuples. Anything else is returned as is."""
    if isinstance(obj, (dict, MappingProxyType)):
        return MappingProxyType({k: freeze(v) for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return tuple(freeze(v) for v in obj)
    return obj


def thaw(obj: Any) -> Any:
    """Inverse of :func:`freeze`: a fresh, mutable plain-JSON copy."""
    if isinstance(obj, (dict, MappingProxyType)):
        return {k: thaw(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [thaw(v) for v in obj]
    return obj


# ─── Entry Hash ───────────────────────────────────────────────────

HASH_ALGORITHM = "sha256"
GENESIS_PREV_HASH = "0"


def compute_entry_hash(
    index: int,
    timestamp: str,
    payload_json: str,
    prev_hash: str,
) -> str:
    """Compute an entry hash using the null-byte separated canonical form.

    Uses \\x00 (null byte) as field separator to prevent boundary
    confusion when fields contain digits or other delimiters.

    Args:
        index: Position of the entry in the chain.
        timestamp: ISO 8601 UTC timestamp.
        payload_json: Canonical JSON string of the entry payload.
        prev_hash: Hash of the previous entry, or "0" for genesis.

    Returns:
        SHA-256 hex digest of the canonical input.
    """
    h_input = f"{index}\x00{timestamp}\x00{payload_json}\x00{prev_hash}"
    return hashlib.new(HASH_ALGORITHM, h_input.encode("utf-8")).hexdigest()
