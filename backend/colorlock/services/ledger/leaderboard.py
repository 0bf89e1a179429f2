"""Read side of the ledger: personal stats and leaderboards.

Reads the denormalized aggregates as they are; nothing here writes.
"""

from dataclasses import asdict
from typing import Optional

from colorlock import db
from colorlock.models import (
    DailyDifficultyStats,
    DifficultyAggregate as DifficultyAggregateRow,
    LeaderboardAggregate,
    User,
    UserPuzzleHistory,
    UserPuzzleRecord,
)
from .sql_store import state_from_row
from .states import DifficultyAggregate, PuzzleHistory, PuzzleRecord, UserAggregate

SCORE_COLUMNS = {
    'last7': LeaderboardAggregate.elo_total_last7,
    'last30': LeaderboardAggregate.elo_total_last30,
    'all_time': LeaderboardAggregate.elo_total_all_time,
}

GOAL_COLUMNS = {
    'beaten': DifficultyAggregateRow.goals_beaten,
    'achieved': DifficultyAggregateRow.goals_achieved,
}

# subcategory -> (current column, longest column)
STREAK_COLUMNS = {
    'first_try': (DifficultyAggregateRow.current_first_try_streak, DifficultyAggregateRow.longest_first_try_streak),
    'goal_achieved': (DifficultyAggregateRow.current_tie_bot_streak, DifficultyAggregateRow.longest_tie_bot_streak),
    'puzzle_completed': (LeaderboardAggregate.current_completed_streak,
                         LeaderboardAggregate.longest_completed_streak),
}

CATEGORIES = {
    'score': SCORE_COLUMNS,
    'goals': GOAL_COLUMNS,
    'streaks': STREAK_COLUMNS,
}


def get_personal_stats(user_id: int, puzzle_id: str, difficulty: str) -> dict:
    q = db.session.query
    history = state_from_row(PuzzleHistory, q(UserPuzzleHistory).filter_by(user_id=user_id, puzzle_id=puzzle_id).first())
    record = state_from_row(
        PuzzleRecord,
        q(UserPuzzleRecord).filter_by(user_id=user_id, puzzle_id=puzzle_id, difficulty=difficulty).first(),
    )
    aggregate = state_from_row(UserAggregate, q(LeaderboardAggregate).filter_by(user_id=user_id).first()) \
        or UserAggregate()
    diff_agg = state_from_row(
        DifficultyAggregate,
        q(DifficultyAggregateRow).filter_by(user_id=user_id, difficulty=difficulty).first(),
    ) or DifficultyAggregate()
    daily = DailyDifficultyStats.query.filter_by(puzzle_id=puzzle_id, difficulty=difficulty).first()

    history = history or PuzzleHistory()
    all_time = asdict(aggregate)
    elo_by_day = all_time.pop('elo_by_day')
    return {
        'puzzle_id': puzzle_id,
        'difficulty': difficulty,
        'today': {
            'attempts': history.attempt_count,
            'hint_used': history.hint_ever_used,
            'completed': history.completed,
            'moves': history.total_moves,
            'best': asdict(record) if record is not None else None,
            'elo_for_day': elo_by_day.get(puzzle_id),
        },
        'daily': daily.to_dict() if daily is not None else None,
        'all_time': all_time,
        'difficulty_totals': asdict(diff_agg),
    }


def _ranked(rows, value_of):
    entries = []
    for position, row in enumerate(rows):
        value = value_of(row)
        if entries and entries[-1]['value'] == value:
            rank = entries[-1]['rank']
        else:
            rank = position + 1
        entries.append({'rank': rank, 'value': value, 'row': row})
    return entries


def get_leaderboard(category: str, subcategory: str, difficulty: Optional[str], user_id: int,
                    size: int = 10) -> dict:
    """Top ``size`` users for one category plus the requester's own rank.

    Rank is 1 + the number of users with a strictly greater value.
    """
    columns = CATEGORIES[category][subcategory]
    if category == 'streaks':
        value_col, longest_col = columns
    else:
        value_col, longest_col = columns, None
    model = value_col.class_

    query = db.session.query(model, User.username).join(User, model.user_id == User.id)
    if model is DifficultyAggregateRow:
        query = query.filter(DifficultyAggregateRow.difficulty == difficulty)

    order = [value_col.desc()]
    if longest_col is not None:
        order.append(longest_col.desc())
    top = query.order_by(*order, User.username).limit(size).all()

    entries = []
    for item in _ranked(top, lambda r: getattr(r[0], value_col.key)):
        row, username = item['row']
        entry = {
            'rank': item['rank'],
            'user_id': row.user_id,
            'username': username,
            'value': item['value'],
        }
        if longest_col is not None:
            longest = getattr(row, longest_col.key)
            entry['longest'] = longest
            entry['is_current_longest'] = item['value'] == longest
        entries.append(entry)

    mine = query.filter(model.user_id == user_id).first()
    my_rank = None
    my_value = None
    if mine is not None:
        my_value = getattr(mine[0], value_col.key)
        my_rank = query.filter(value_col > my_value).count() + 1

    return {
        'category': category,
        'subcategory': subcategory,
        'difficulty': difficulty if model is DifficultyAggregateRow else None,
        'entries': entries,
        'user_rank': my_rank,
        'user_value': my_value,
    }
