"""
Request schemas

One pydantic model per operation. Views validate the JSON body or query
string against these before touching the database.
"""

from datetime import date
from typing import Annotated, List, Optional, Tuple

from pydantic import AfterValidator, BaseModel, Field, StrictBool, field_validator, model_validator

from colorlock.services.ledger.states import Outcome
from colorlock.services.puzzles.actions import COLORS
from colorlock.services.puzzles.engine import Difficulty

LEADERBOARD_SUBCATEGORIES = {
    'score': ('last7', 'last30', 'all_time'),
    'goals': ('beaten', 'achieved'),
    'streaks': ('first_try', 'goal_achieved', 'puzzle_completed'),
}


def _iso_date(value: str) -> str:
    date.fromisoformat(value)
    return value


class SubmitAttemptRequest(BaseModel):
    puzzle_id: Annotated[str, AfterValidator(_iso_date)] = Field(..., description="ISO date of the daily puzzle")
    difficulty: Difficulty
    attempt_number: int = Field(..., ge=1, description="Client-side attempt counter")
    move_count: int = Field(..., ge=0)
    hint_used: StrictBool
    bot_move_count: int = Field(..., ge=0, description="Optimal move count the client played against")
    outcome: Outcome
    user_id: Optional[int] = Field(None, description="Must match the signed-in user when given")


class HintRequest(BaseModel):
    difficulty: Difficulty
    moves_played: int = Field(..., ge=0)
    grid: Optional[List[List[str]]] = Field(None, description="Current board, to list the hinted region")

    @field_validator('grid')
    @classmethod
    def known_colors(cls, grid):
        if grid is not None:
            if not grid or any(len(line) != len(grid) for line in grid):
                raise ValueError("grid must be square")
            for line in grid:
                for cell in line:
                    if cell not in COLORS:
                        raise ValueError(f"unknown color {cell!r}")
        return grid


class ReplayRequest(BaseModel):
    difficulty: Difficulty
    moves: List[Tuple[int, int, str]] = Field(default_factory=list, description="[row, col, color] per move")


class DailyStatsQuery(BaseModel):
    difficulty: Difficulty = Difficulty.HARD


class LeaderboardQuery(BaseModel):
    category: str = 'score'
    subcategory: str = 'all_time'
    difficulty: Difficulty = Difficulty.HARD

    @model_validator(mode='after')
    def known_board(self):
        allowed = LEADERBOARD_SUBCATEGORIES.get(self.category)
        if allowed is None:
            raise ValueError(f"unknown category {self.category!r}")
        if self.subcategory not in allowed:
            raise ValueError(f"unknown subcategory {self.subcategory!r} for {self.category}")
        return self
