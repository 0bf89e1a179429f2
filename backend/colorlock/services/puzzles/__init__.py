"""Puzzle domain: regions, moves, hints and scoring.

Everything in this package is pure: no database, request or logging
imports. HTTP routes and the attempt ledger call into it, keeping the
game rules testable on plain lists.
"""

from .regions import find_region, largest_region, is_unified
from .actions import COLORS, decode_action, encode_action
from .engine import Difficulty, GameStatus, MoveEngine, PuzzleDefinition
from .hints import Hint, HintEngine
from .scoring import ScoreBreakdown, calculate_score, cumulative_penalty

__all__ = [
    "COLORS",
    "find_region",
    "largest_region",
    "is_unified",
    "decode_action",
    "encode_action",
    "Difficulty",
    "GameStatus",
    "MoveEngine",
    "PuzzleDefinition",
    "Hint",
    "HintEngine",
    "ScoreBreakdown",
    "calculate_score",
    "cumulative_penalty",
]
