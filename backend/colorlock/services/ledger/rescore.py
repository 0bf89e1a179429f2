from datetime import date
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from colorlock import db
from colorlock.models import LeaderboardAggregate, Puzzle, UserPuzzleRecord
from colorlock.services.puzzles.engine import Difficulty
from .ledger import score_record
from .sql_store import state_from_row
from .states import PuzzleRecord
from .streaks import elo_totals


def rescore(puzzle_id: Optional[str] = None, today: Optional[date] = None) -> int:
    """Re-derive stored Elo scores from the stored record fields.

    Afterwards every touched user's per-day Elo map and rolling sums are
    rebuilt from their records. Returns the number of records whose score
    changed.
    """
    today = today or date.today()
    query = db.session.query(UserPuzzleRecord, Puzzle.optimal_move_count) \
        .join(Puzzle, UserPuzzleRecord.puzzle_id == Puzzle.date)
    if puzzle_id is not None:
        query = query.filter(UserPuzzleRecord.puzzle_id == puzzle_id)

    changed = 0
    users = set()
    for row, bot_moves in query.all():
        state = state_from_row(PuzzleRecord, row)
        score = score_record(state, Difficulty(row.difficulty), bot_moves)
        if score != row.elo_score:
            row.elo_score = score
            changed += 1
        users.add(row.user_id)

    for user_id in users:
        aggregate = LeaderboardAggregate.query.filter_by(user_id=user_id).first()
        if aggregate is None:
            continue
        by_day: Dict[str, int] = {}
        records = UserPuzzleRecord.query.filter(
            UserPuzzleRecord.user_id == user_id,
            UserPuzzleRecord.elo_score.isnot(None),
        ).all()
        for record in records:
            by_day[record.puzzle_id] = max(by_day.get(record.puzzle_id, record.elo_score), record.elo_score)
        totals = elo_totals(by_day, today)
        aggregate.elo_by_day = by_day
        aggregate.elo_total_all_time = totals.all_time
        aggregate.elo_total_last30 = totals.last30
        aggregate.elo_total_last7 = totals.last7

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return changed
