import enum
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set, Tuple

from .actions import COLORS, decode_action
from .regions import Cell, Grid, is_unified, largest_region, recolor


class Difficulty(str, enum.Enum):
    EASY = 'easy'
    MEDIUM = 'medium'
    HARD = 'hard'


class GameStatus(str, enum.Enum):
    IN_PROGRESS = 'in_progress'
    SOLVED = 'solved'
    LOST = 'lost'


# Optimal-trace actions played for the user before the first move.
PRE_APPLIED_ACTIONS: Dict[Difficulty, int] = {
    Difficulty.HARD: 0,
    Difficulty.MEDIUM: 1,
    Difficulty.EASY: 3,
}

DEFAULT_LOSS_THRESHOLDS: Dict[Difficulty, int] = {
    Difficulty.EASY: 8,
    Difficulty.MEDIUM: 13,
    Difficulty.HARD: 18,
}


@dataclass(frozen=True)
class PuzzleDefinition:
    """Immutable daily puzzle as published by the puzzle source."""
    date: str
    initial_grid: List[List[str]]
    target_color: str
    actions: List[int]
    optimal_move_count: int
    color_map: Optional[List[int]] = field(default=None)

    @property
    def grid_size(self) -> int:
        return len(self.initial_grid)

    @classmethod
    def from_dict(cls, date: str, data: Mapping) -> 'PuzzleDefinition':
        """Build from a puzzle-source record.

        Accepts both the documented keys (``initialGrid``, ``optimalActionTrace``,
        ``optimalMoveCount``, ``colorPermutation``) and the legacy export keys
        (``states[0]``, ``actions``, ``algoScore``, ``colorMap``).
        """
        grid = data.get('initialGrid')
        if grid is None:
            states = data.get('states') or []
            first = states[0] if states else {}
            # legacy exports store rows as {"0": [...], "1": [...]}
            grid = [first[str(i)] for i in range(len(first))] if isinstance(first, dict) else first
        trace = data.get('optimalActionTrace', data.get('actions')) or []
        moves = data.get('optimalMoveCount', data.get('algoScore'))
        color_map = data.get('colorPermutation', data.get('colorMap'))
        if not grid or moves is None or not data.get('targetColor'):
            raise ValueError(f"incomplete puzzle record for {date}")
        return cls(
            date=date,
            initial_grid=[list(line) for line in grid],
            target_color=data['targetColor'],
            actions=[int(a) for a in trace],
            optimal_move_count=int(moves),
            color_map=list(color_map) if color_map else None,
        )

    def apply_action(self, grid: Grid, action_id: int) -> Grid:
        action = decode_action(action_id, self.color_map, self.grid_size)
        painted, _ = recolor(grid, action.row, action.col, action.color)
        return painted

    def starting_state(self, difficulty: Difficulty) -> Tuple[Grid, int]:
        """Grid the player starts from and the trace index it corresponds to.

        Short traces apply as many actions as they have.
        """
        applied = min(PRE_APPLIED_ACTIONS[Difficulty(difficulty)], len(self.actions))
        grid = [list(line) for line in self.initial_grid]
        for action_id in self.actions[:applied]:
            grid = self.apply_action(grid, action_id)
        return grid, applied


class MoveEngine:
    """One player's play-through of a puzzle.

    The locked region starts as the largest region of the starting grid and
    is only replaced by a strictly larger region after a move. Locked cells
    cannot be recolored. Status moves from ``IN_PROGRESS`` to ``SOLVED`` or
    ``LOST`` and then stays there.
    """

    def __init__(self, grid: Grid, target_color: str, loss_threshold: int, start_index: int = 0):
        if target_color not in COLORS:
            raise ValueError(f"unknown target color {target_color!r}")
        self.grid: Grid = [list(line) for line in grid]
        self.target_color = target_color
        self.loss_threshold = loss_threshold
        self.start_index = start_index
        self.move_count = 0
        self.locked: Set[Cell] = largest_region(self.grid)
        self.status = GameStatus.IN_PROGRESS
        self._evaluate()

    @classmethod
    def for_puzzle(cls, puzzle: PuzzleDefinition, difficulty: Difficulty,
                   loss_thresholds: Optional[Mapping[Difficulty, int]] = None) -> 'MoveEngine':
        difficulty = Difficulty(difficulty)
        thresholds = loss_thresholds or DEFAULT_LOSS_THRESHOLDS
        grid, start_index = puzzle.starting_state(difficulty)
        return cls(grid, puzzle.target_color, thresholds[difficulty], start_index=start_index)

    @property
    def size(self) -> int:
        return len(self.grid)

    @property
    def locked_color(self) -> Optional[str]:
        if not self.locked:
            return None
        r, c = min(self.locked)
        return self.grid[r][c]

    @property
    def is_over(self) -> bool:
        return self.status is not GameStatus.IN_PROGRESS

    def is_locked(self, row: int, col: int) -> bool:
        return (row, col) in self.locked

    def move(self, row: int, col: int, color: str) -> bool:
        """Recolor the region at (row, col). Returns False when rejected."""
        if not (0 <= row < self.size and 0 <= col < len(self.grid[row])):
            raise ValueError(f"cell ({row}, {col}) is off the board")
        if color not in COLORS:
            raise ValueError(f"unknown color {color!r}")
        if self.is_over or self.is_locked(row, col) or self.grid[row][col] == color:
            return False

        self.grid, _ = recolor(self.grid, row, col, color)
        self.move_count += 1

        candidate = largest_region(self.grid)
        if len(candidate) > len(self.locked):
            self.locked = candidate
        self._evaluate()
        return True

    def _evaluate(self) -> None:
        if is_unified(self.grid):
            if self.grid[0][0] == self.target_color:
                self.status = GameStatus.SOLVED
                self.locked = set()
            else:
                self.status = GameStatus.LOST
        elif len(self.locked) >= self.loss_threshold and self.locked_color != self.target_color:
            self.status = GameStatus.LOST

    def to_dict(self) -> dict:
        return {
            'grid': [list(line) for line in self.grid],
            'target_color': self.target_color,
            'locked_cells': sorted([r, c] for r, c in self.locked),
            'locked_color': self.locked_color,
            'loss_threshold': self.loss_threshold,
            'move_count': self.move_count,
            'start_index': self.start_index,
            'status': self.status.value,
        }
