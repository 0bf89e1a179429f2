from datetime import date, timedelta
from typing import Mapping, NamedTuple, Optional, Union

DateLike = Union[date, str]


class Streak(NamedTuple):
    current: int
    longest: int
    last_date: Optional[str]


def _as_date(value: DateLike) -> date:
    return value if isinstance(value, date) else date.fromisoformat(value)


def advance_streak(streak: Streak, puzzle_date: DateLike, achieved: bool) -> Streak:
    """Fold one attempt on ``puzzle_date`` into a daily streak.

    An achieving attempt extends the streak when the previous achievement was
    the calendar day before, and restarts it at 1 after any gap. A second
    achievement on the same day changes nothing. A non-achieving attempt
    drops the current streak to 0 unless the day was already achieved.
    """
    day = _as_date(puzzle_date)
    key = day.isoformat()
    if streak.last_date == key:
        return streak
    if not achieved:
        return Streak(0, streak.longest, streak.last_date)
    previous = (day - timedelta(days=1)).isoformat()
    current = streak.current + 1 if streak.last_date == previous else 1
    return Streak(current, max(streak.longest, current), key)


class EloTotals(NamedTuple):
    all_time: int
    last30: int
    last7: int


def elo_totals(elo_by_day: Mapping[str, int], today: DateLike) -> EloTotals:
    """Rolling sums over the per-day best Elo map.

    A day falls in the trailing N-day window when it is fewer than N days
    before ``today``.
    """
    ref = _as_date(today)
    all_time = last30 = last7 = 0
    for key, score in elo_by_day.items():
        if score is None:
            continue
        all_time += score
        age = (ref - date.fromisoformat(key)).days
        if age < 30:
            last30 += score
        if age < 7:
            last7 += score
    return EloTotals(all_time, last30, last7)
