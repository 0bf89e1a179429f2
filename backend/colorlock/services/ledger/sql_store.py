import copy
from dataclasses import fields

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from colorlock.models import (
    DailyDifficultyScores,
    DifficultyAggregate as DifficultyAggregateRow,
    LeaderboardAggregate,
    UserPuzzleHistory,
    UserPuzzleRecord,
)
from .states import (
    Attempt,
    DifficultyAggregate,
    LedgerSnapshot,
    LedgerWrite,
    PuzzleHistory,
    PuzzleRecord,
    UserAggregate,
)
from .store import LedgerStore, TransactionConflict


def state_from_row(state_cls, row):
    if row is None:
        return None
    return state_cls(**{f.name: copy.deepcopy(getattr(row, f.name)) for f in fields(state_cls)})


def _apply(row, state):
    for f in fields(state):
        setattr(row, f.name, getattr(state, f.name))
    return row


class SqlLedgerStore(LedgerStore):
    """Ledger documents as versioned rows.

    Updates are guarded by each row's ``version`` column and first inserts
    by the natural unique keys, so a concurrent commit surfaces here as
    ``StaleDataError`` or ``IntegrityError`` and is reported as a conflict.
    """

    def __init__(self, session):
        self.session = session

    def load(self, attempt: Attempt) -> LedgerSnapshot:
        q = self.session.query
        uid, pid, level = attempt.user_id, attempt.puzzle_id, attempt.difficulty.value
        history = q(UserPuzzleHistory).filter_by(user_id=uid, puzzle_id=pid).first()
        record = q(UserPuzzleRecord).filter_by(user_id=uid, puzzle_id=pid, difficulty=level).first()
        aggregate = q(LeaderboardAggregate).filter_by(user_id=uid).first()
        diff_agg = q(DifficultyAggregateRow).filter_by(user_id=uid, difficulty=level).first()
        scores = q(DailyDifficultyScores).filter_by(puzzle_id=pid, difficulty=level).first()
        return LedgerSnapshot(
            history=state_from_row(PuzzleHistory, history),
            record=state_from_row(PuzzleRecord, record),
            aggregate=state_from_row(UserAggregate, aggregate),
            difficulty_aggregate=state_from_row(DifficultyAggregate, diff_agg),
            daily_scores=dict(scores.scores or {}) if scores is not None else None,
            handles={
                'history': history,
                'record': record,
                'aggregate': aggregate,
                'difficulty_aggregate': diff_agg,
                'daily_scores': scores,
            },
        )

    def save(self, attempt: Attempt, snapshot: LedgerSnapshot, plan: LedgerWrite) -> None:
        uid, pid, level = attempt.user_id, attempt.puzzle_id, attempt.difficulty.value
        rows = snapshot.handles
        self.session.add_all([
            _apply(rows.get('history') or UserPuzzleHistory(user_id=uid, puzzle_id=pid), plan.history),
            _apply(rows.get('record') or UserPuzzleRecord(user_id=uid, puzzle_id=pid, difficulty=level),
                   plan.record),
            _apply(rows.get('aggregate') or LeaderboardAggregate(user_id=uid), plan.aggregate),
            _apply(rows.get('difficulty_aggregate') or DifficultyAggregateRow(user_id=uid, difficulty=level),
                   plan.difficulty_aggregate),
        ])
        if plan.daily_scores is not None:
            scores = rows.get('daily_scores') or DailyDifficultyScores(puzzle_id=pid, difficulty=level)
            scores.scores = dict(plan.daily_scores)
            self.session.add(scores)
        try:
            self.session.commit()
        except (StaleDataError, IntegrityError) as exc:
            self.session.rollback()
            raise TransactionConflict(type(exc).__name__) from exc
        except SQLAlchemyError:
            self.session.rollback()
            raise
