"""Attempt ledger: the write side of attempts plus its read models.

``AttemptLedger`` folds one finished attempt into the per-user documents in
a single optimistic transaction. The storage port keeps the folding logic
free of SQLAlchemy so it can run against the in-memory store in tests.
"""

from .ledger import AttemptLedger, LedgerContentionError, score_record
from .states import Attempt, Outcome, SubmissionResult
from .store import LedgerStore, TransactionConflict

__all__ = [
    "AttemptLedger",
    "LedgerContentionError",
    "score_record",
    "Attempt",
    "Outcome",
    "SubmissionResult",
    "LedgerStore",
    "TransactionConflict",
]
