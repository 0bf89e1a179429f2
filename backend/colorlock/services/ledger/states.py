import enum
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional

from colorlock.services.puzzles.engine import Difficulty


class Outcome(str, enum.Enum):
    WON = 'won'
    LOST = 'lost'
    # "try again" before finishing; counts as a loss for streaks
    ABANDONED = 'abandoned'


@dataclass(frozen=True)
class Attempt:
    """A finished play-through as submitted by the client."""
    user_id: int
    puzzle_id: str
    difficulty: Difficulty
    move_count: int
    hint_used: bool
    bot_move_count: int
    outcome: Outcome
    client_attempt_number: Optional[int] = None

    @property
    def won(self) -> bool:
        return self.outcome is Outcome.WON

    @property
    def puzzle_date(self) -> date:
        return date.fromisoformat(self.puzzle_id)


@dataclass
class PuzzleHistory:
    """Per user and puzzle, shared by all difficulties."""
    attempt_count: int = 0
    hint_ever_used: bool = False
    completed: bool = False
    total_moves: int = 0


@dataclass
class PuzzleRecord:
    """Best known outcome per user, puzzle and difficulty."""
    move_count: Optional[int] = None
    elo_score: Optional[int] = None
    first_try: bool = False
    hint_used: bool = False
    attempt_to_win: Optional[int] = None
    attempt_to_tie: Optional[int] = None
    attempt_to_beat: Optional[int] = None
    first_to_beat_bot: bool = False


@dataclass
class UserAggregate:
    games_played: int = 0
    total_attempts: int = 0
    total_moves: int = 0
    total_wins: int = 0
    puzzles_completed: int = 0
    current_completed_streak: int = 0
    longest_completed_streak: int = 0
    last_completed_date: Optional[str] = None
    elo_by_day: Dict[str, int] = field(default_factory=dict)
    elo_total_all_time: int = 0
    elo_total_last30: int = 0
    elo_total_last7: int = 0


@dataclass
class DifficultyAggregate:
    wins: int = 0
    goals_achieved: int = 0
    goals_beaten: int = 0
    current_tie_bot_streak: int = 0
    longest_tie_bot_streak: int = 0
    last_tie_bot_date: Optional[str] = None
    current_first_try_streak: int = 0
    longest_first_try_streak: int = 0
    last_first_try_date: Optional[str] = None


@dataclass
class LedgerSnapshot:
    """Everything the ledger reads, taken before anything is written.

    ``handles`` belongs to the store that produced the snapshot (row objects,
    version tokens) and is passed back to it unchanged on save.
    """
    history: Optional[PuzzleHistory] = None
    record: Optional[PuzzleRecord] = None
    aggregate: Optional[UserAggregate] = None
    difficulty_aggregate: Optional[DifficultyAggregate] = None
    daily_scores: Optional[Dict[str, int]] = None
    handles: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SubmissionResult:
    attempt_index: int
    first_try: bool
    first_to_beat_bot: bool
    elo_score: Optional[int]
    improved: bool

    def to_dict(self) -> dict:
        return {
            'attempt_index': self.attempt_index,
            'first_try': self.first_try,
            'first_to_beat_bot': self.first_to_beat_bot,
            'elo_score': self.elo_score,
        }


@dataclass
class LedgerWrite:
    """New state for every document the ledger owns.

    ``daily_scores`` stays None when the shared map must not be written.
    """
    history: PuzzleHistory
    record: PuzzleRecord
    aggregate: UserAggregate
    difficulty_aggregate: DifficultyAggregate
    result: SubmissionResult
    daily_scores: Optional[Dict[str, int]] = None
