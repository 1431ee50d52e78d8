"""
VOTECHAIN: Tamper-Evident Vote Ledger.

Append-only, hash-linked vote recording with full-chain verification,
served over HTTP with a durable voter registry alongside.
"""

__version__ = "1.0.0"
__author__ = "Borja Moskv"

from votechain.consensus.vote_ledger import Entry, VoteLedger

__all__ = ["Entry", "VoteLedger", "__version__"]
