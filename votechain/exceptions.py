"""
VOTECHAIN: Custom Exceptions.

Typed error hierarchy so storage and ledger details never leak
through API boundaries as raw driver errors.
"""


class VotechainError(Exception):
    """Base exception for all VOTECHAIN errors."""


class SerializationError(VotechainError):
    """Raised when a payload has no canonical JSON form."""


class DuplicateVoterError(VotechainError):
    """Raised when a voter id has already been recorded."""

    def __init__(self, voter_id: str):
        self.voter_id = voter_id
        super().__init__(f"Voter {voter_id!r} has already voted")


class LedgerIntegrityError(VotechainError):
    """Raised by the outer layers when an audit finds violations.

    The ledger itself never raises this; it only reports.
    """

    def __init__(self, report):
        self.report = report
        super().__init__(
            f"Ledger integrity violation: {len(report.violations)} violation(s)"
        )
