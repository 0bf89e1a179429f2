import logging
from dataclasses import replace
from datetime import date
from typing import Callable, Optional

from colorlock.services.puzzles.engine import Difficulty
from colorlock.services.puzzles.scoring import calculate_score, penalty_attempt
from .states import (
    Attempt,
    DifficultyAggregate,
    LedgerSnapshot,
    LedgerWrite,
    PuzzleHistory,
    PuzzleRecord,
    SubmissionResult,
    UserAggregate,
)
from .store import LedgerStore, TransactionConflict
from .streaks import Streak, advance_streak, elo_totals


class LedgerContentionError(RuntimeError):
    """A submission kept conflicting with concurrent writers."""


def score_record(record: PuzzleRecord, difficulty: Difficulty, bot_moves: int) -> Optional[int]:
    """Elo score of a stored record, derived from its stored fields only."""
    if record.move_count is None or record.attempt_to_win is None:
        return None
    return calculate_score(
        difficulty,
        bot_moves,
        record.move_count,
        record.attempt_to_win,
        penalty_attempt(record.attempt_to_beat, record.attempt_to_tie, record.attempt_to_win),
        record.first_to_beat_bot,
    )


def _copy(state, default):
    return replace(state) if state is not None else default


class AttemptLedger:
    """Records finished attempts against a ``LedgerStore``.

    Each submission is one read, plan, write cycle. ``plan`` is pure: it
    sees only the snapshot and the attempt, so a conflicting cycle can be
    thrown away and re-run verbatim on a fresh snapshot.
    """

    def __init__(self, store: LedgerStore, max_retries: int = 3,
                 clock: Callable[[], date] = date.today, logger: Optional[logging.Logger] = None):
        self.store = store
        self.max_retries = max_retries
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    def submit(self, attempt: Attempt) -> SubmissionResult:
        tries = self.max_retries + 1
        for n in range(1, tries + 1):
            snapshot = self.store.load(attempt)
            plan = self.plan(attempt, snapshot, self.clock())
            try:
                self.store.save(attempt, snapshot, plan)
            except TransactionConflict as exc:
                self.logger.warning(
                    f"[ledger-conflict] user={attempt.user_id} puzzle={attempt.puzzle_id} "
                    f"difficulty={attempt.difficulty.value} try={n}/{tries} reason={exc}"
                )
                continue
            self.logger.info(
                f"[ledger-commit] user={attempt.user_id} puzzle={attempt.puzzle_id} "
                f"difficulty={attempt.difficulty.value} outcome={attempt.outcome.value} "
                f"attempt={plan.result.attempt_index} improved={plan.result.improved} "
                f"elo={plan.result.elo_score}"
            )
            return plan.result
        raise LedgerContentionError(
            f"gave up after {tries} conflicting tries for user {attempt.user_id} on {attempt.puzzle_id}"
        )

    def plan(self, attempt: Attempt, snapshot: LedgerSnapshot, today: date) -> LedgerWrite:
        history = _copy(snapshot.history, PuzzleHistory())
        aggregate = _copy(snapshot.aggregate, UserAggregate())
        diff_agg = _copy(snapshot.difficulty_aggregate, DifficultyAggregate())
        record = _copy(snapshot.record, PuzzleRecord())

        moves = attempt.move_count
        bot = attempt.bot_move_count
        uid = str(attempt.user_id)

        history.attempt_count += 1
        index = history.attempt_count
        history.total_moves += moves
        history.hint_ever_used = history.hint_ever_used or attempt.hint_used

        if snapshot.history is None:
            aggregate.games_played += 1
        aggregate.total_attempts += 1
        aggregate.total_moves += moves

        first_try = attempt.won and index == 1 and moves <= bot and not attempt.hint_used
        improved = False
        daily_scores = None

        if attempt.won:
            aggregate.total_wins += 1
            diff_agg.wins += 1
            if not history.completed:
                history.completed = True
                aggregate.puzzles_completed += 1

            if record.attempt_to_win is None:
                record.attempt_to_win = index
            improved = record.move_count is None or moves < record.move_count
            if improved:
                record.move_count = moves
                record.hint_used = attempt.hint_used
                record.first_try = record.first_try or first_try
                if moves <= bot and record.attempt_to_tie is None:
                    record.attempt_to_tie = index
                    diff_agg.goals_achieved += 1
                if moves < bot and record.attempt_to_beat is None:
                    record.attempt_to_beat = index
                    diff_agg.goals_beaten += 1
                if attempt.difficulty is Difficulty.HARD and moves < bot and not record.first_to_beat_bot:
                    # Snapshot read: two near-simultaneous winners can both see no one ahead.
                    others = [v for k, v in (snapshot.daily_scores or {}).items() if k != uid]
                    record.first_to_beat_bot = not others or min(others) >= bot
                record.elo_score = score_record(record, attempt.difficulty, bot)

                daily_scores = dict(snapshot.daily_scores or {})
                if uid not in daily_scores or moves < daily_scores[uid]:
                    daily_scores[uid] = moves
                else:
                    daily_scores = None

                self._fold_elo(aggregate, attempt.puzzle_id, record.elo_score, today)

        self._fold_streaks(aggregate, diff_agg, attempt, first_try)

        result = SubmissionResult(
            attempt_index=index,
            first_try=first_try,
            first_to_beat_bot=record.first_to_beat_bot,
            elo_score=record.elo_score,
            improved=improved,
        )
        return LedgerWrite(
            history=history,
            record=record,
            aggregate=aggregate,
            difficulty_aggregate=diff_agg,
            result=result,
            daily_scores=daily_scores,
        )

    @staticmethod
    def _fold_elo(aggregate: UserAggregate, puzzle_id: str, score: Optional[int], today: date) -> None:
        if score is None:
            return
        best = aggregate.elo_by_day.get(puzzle_id)
        if best is not None and score <= best:
            return
        aggregate.elo_by_day = {**aggregate.elo_by_day, puzzle_id: score}
        totals = elo_totals(aggregate.elo_by_day, today)
        aggregate.elo_total_all_time = totals.all_time
        aggregate.elo_total_last30 = totals.last30
        aggregate.elo_total_last7 = totals.last7

    @staticmethod
    def _fold_streaks(aggregate: UserAggregate, diff_agg: DifficultyAggregate,
                      attempt: Attempt, first_try: bool) -> None:
        day = attempt.puzzle_date
        tied = attempt.won and attempt.move_count <= attempt.bot_move_count

        completed = advance_streak(
            Streak(aggregate.current_completed_streak, aggregate.longest_completed_streak,
                   aggregate.last_completed_date),
            day, attempt.won,
        )
        aggregate.current_completed_streak, aggregate.longest_completed_streak, \
            aggregate.last_completed_date = completed

        tie_bot = advance_streak(
            Streak(diff_agg.current_tie_bot_streak, diff_agg.longest_tie_bot_streak, diff_agg.last_tie_bot_date),
            day, tied,
        )
        diff_agg.current_tie_bot_streak, diff_agg.longest_tie_bot_streak, diff_agg.last_tie_bot_date = tie_bot

        first = advance_streak(
            Streak(diff_agg.current_first_try_streak, diff_agg.longest_first_try_streak,
                   diff_agg.last_first_try_date),
            day, first_try,
        )
        diff_agg.current_first_try_streak, diff_agg.longest_first_try_streak, \
            diff_agg.last_first_try_date = first
