"""
VOTECHAIN: Merkle Tree Utilities.

Merkle root over a chain's entry hashes. Used as a compact fingerprint
of a ledger snapshot in audit reports, so two auditors can compare a
single value instead of the whole export.
"""

import hashlib
from typing import List


def _hash_pair(left: str, right: str) -> str:
    return hashlib.sha256(f"{left}{right}".encode()).hexdigest()


def compute_merkle_root(hashes: List[str]) -> str:
    """
    Compute the Merkle root of a list of hashes.

    Args:
        hashes: List of SHA-256 hex strings.

    Returns:
        Hex string of the Merkle root, or "" for an empty list.
    """
    if not hashes:
        return ""

    current_level = list(hashes)

    while len(current_level) > 1:
        next_level = []
        for i in range(0, len(current_level), 2):
            left = current_level[i]
            # Odd level: the last node is paired with itself
            right = current_level[i + 1] if i + 1 < len(current_level) else left
            next_level.append(_hash_pair(left, right))
        current_level = next_level

    return current_level[0]

