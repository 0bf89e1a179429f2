from .states import Attempt, LedgerSnapshot, LedgerWrite


class TransactionConflict(Exception):
    """Another writer committed one of the documents this transaction read."""


class LedgerStore:
    """Storage port the ledger runs against.

    ``load`` takes every read for one submission; ``save`` writes the plan
    and commits atomically, or raises ``TransactionConflict`` (nothing
    persisted) when a document read by ``load`` changed in the meantime.
    Any other error also leaves nothing persisted.
    """

    def load(self, attempt: Attempt) -> LedgerSnapshot:
        raise NotImplementedError

    def save(self, attempt: Attempt, snapshot: LedgerSnapshot, plan: LedgerWrite) -> None:
        raise NotImplementedError
