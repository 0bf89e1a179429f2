import math
from dataclasses import dataclass
from typing import Optional

from .engine import Difficulty

DIFFICULTY_MULTIPLIER = {
    Difficulty.EASY: 0.5,
    Difficulty.MEDIUM: 0.75,
    Difficulty.HARD: 1.0,
}

WIN_BONUS = 200

# Per move of margin over the bot. Not scaled by the difficulty multiplier.
TIE_OR_BEAT_BONUS = {
    Difficulty.EASY: 30,
    Difficulty.MEDIUM: 60,
    Difficulty.HARD: 200,
}

FIRST_TO_BEAT_BOT_BONUS = {
    Difficulty.EASY: 50,
    Difficulty.MEDIUM: 100,
    Difficulty.HARD: 200,
}

PENALTY_PER_ATTEMPT = -20
PENALTY_ATTEMPT_CAP = 30


@dataclass(frozen=True)
class ScoreBreakdown:
    adjusted_win_bonus: float
    tie_or_beat_bonus: float
    adjusted_penalty: float
    first_to_beat_bot_bonus: float

    @property
    def raw(self) -> float:
        return self.adjusted_win_bonus + self.tie_or_beat_bonus + self.adjusted_penalty + self.first_to_beat_bot_bonus

    @property
    def total(self) -> int:
        return round_half_up(self.raw)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def cumulative_penalty(attempt: Optional[int]) -> float:
    """Total penalty for needing ``attempt`` attempts.

    Attempt k (k >= 2) costs -20 / sqrt(k - 1); attempts past the 30th are
    free, so the total saturates at the value for 30.
    """
    if attempt is None or attempt <= 1:
        return 0.0
    total = 0.0
    for k in range(2, min(attempt, PENALTY_ATTEMPT_CAP) + 1):
        total += PENALTY_PER_ATTEMPT / math.sqrt(k - 1)
    return total


def penalty_attempt(attempt_to_beat: Optional[int], attempt_to_tie: Optional[int],
                    win_attempt: Optional[int]) -> Optional[int]:
    """Attempt index the penalty is charged on: beat, then tie, then first win."""
    if attempt_to_beat is not None:
        return attempt_to_beat
    if attempt_to_tie is not None:
        return attempt_to_tie
    return win_attempt


def score_breakdown(difficulty: Difficulty, bot_moves: int, player_moves: int,
                    win_attempt: Optional[int], penalty_basis: Optional[int],
                    first_to_beat_bot: bool = False) -> ScoreBreakdown:
    difficulty = Difficulty(difficulty)
    multiplier = DIFFICULTY_MULTIPLIER[difficulty]

    win_bonus = WIN_BONUS if win_attempt is not None else 0
    tie_or_beat = 0
    if player_moves <= bot_moves:
        tie_or_beat = TIE_OR_BEAT_BONUS[difficulty] * (bot_moves - player_moves + 1)

    return ScoreBreakdown(
        adjusted_win_bonus=win_bonus * multiplier,
        tie_or_beat_bonus=tie_or_beat,
        adjusted_penalty=cumulative_penalty(penalty_basis) * multiplier,
        first_to_beat_bot_bonus=FIRST_TO_BEAT_BOT_BONUS[difficulty] if first_to_beat_bot else 0,
    )


def calculate_score(difficulty: Difficulty, bot_moves: int, player_moves: int,
                    win_attempt: Optional[int], penalty_basis: Optional[int],
                    first_to_beat_bot: bool = False) -> int:
    """Elo points for one best record.

    Depends only on its arguments, so any stored record can be re-scored.
    """
    return score_breakdown(difficulty, bot_moves, player_moves, win_attempt,
                           penalty_basis, first_to_beat_bot).total
