from dataclasses import dataclass
from typing import List, Optional, Tuple

from .actions import decode_action
from .engine import Difficulty, PuzzleDefinition
from .regions import Grid, find_region


@dataclass(frozen=True)
class Hint:
    row: int
    col: int
    color: str
    action_id: int
    trace_index: int
    cells: Tuple[Tuple[int, int], ...] = ()

    def to_dict(self) -> dict:
        return {
            'row': self.row,
            'col': self.col,
            'color': self.color,
            'action_id': self.action_id,
            'trace_index': self.trace_index,
            'cells': [list(cell) for cell in self.cells],
        }


class HintEngine:
    """Next move of the optimal trace for a player who has made N moves.

    Medium and Easy boards start part-way through the trace, so the lookup is
    offset by the number of pre-applied actions. Past the end of the trace
    there is nothing to suggest and ``hint`` returns None.
    """

    def __init__(self, puzzle: PuzzleDefinition, difficulty: Difficulty):
        self.puzzle = puzzle
        self.difficulty = Difficulty(difficulty)
        _, self.start_index = puzzle.starting_state(self.difficulty)

    def trace_index(self, moves_played: int) -> int:
        return moves_played + self.start_index

    def hint(self, moves_played: int, grid: Optional[Grid] = None) -> Optional[Hint]:
        if moves_played < 0:
            raise ValueError("moves_played must be non-negative")
        index = self.trace_index(moves_played)
        if index >= len(self.puzzle.actions):
            return None
        action = decode_action(self.puzzle.actions[index], self.puzzle.color_map, self.puzzle.grid_size)
        cells: List[Tuple[int, int]] = []
        if grid is not None and action.in_bounds(len(grid)):
            cells = sorted(find_region(grid, action.row, action.col))
        return Hint(
            row=action.row,
            col=action.col,
            color=action.color,
            action_id=action.action_id,
            trace_index=index,
            cells=tuple(cells),
        )
