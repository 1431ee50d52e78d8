"""
VOTECHAIN: Consensus Layer.

Provides the immutable vote ledger and Merkle fingerprinting of its entries.
"""

from .merkle import compute_merkle_root
from .vote_ledger import Entry, IntegrityReport, IntegrityViolation, VoteLedger
