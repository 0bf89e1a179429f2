"""Action ids of the optimal trace.

An action id packs (row, col, color slot) into one integer::

    action_id = (N - 1 - row) * N * NUM_COLORS + col * NUM_COLORS + slot

Rows are counted from the bottom of the board. A puzzle may carry a color
map (``color_map[color_index] == slot``) that permutes which concrete color
a slot stands for.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

COLORS = ('red', 'green', 'blue', 'yellow', 'purple', 'orange')
NUM_COLORS = len(COLORS)
GRID_SIZE = 5


@dataclass(frozen=True)
class Action:
    row: int
    col: int
    color: str
    action_id: int

    def in_bounds(self, grid_size: int = GRID_SIZE) -> bool:
        return 0 <= self.row < grid_size and 0 <= self.col < grid_size


def _slot_to_color(slot: int, color_map: Optional[Sequence[int]]) -> str:
    if color_map and slot in color_map:
        return COLORS[list(color_map).index(slot)]
    return COLORS[slot]


def decode_action(action_id: int, color_map: Optional[Sequence[int]] = None, grid_size: int = GRID_SIZE) -> Action:
    stride = grid_size * NUM_COLORS
    row = (grid_size - 1) - action_id // stride
    remainder = action_id % stride
    col = remainder // NUM_COLORS
    slot = remainder % NUM_COLORS
    return Action(row=row, col=col, color=_slot_to_color(slot, color_map), action_id=action_id)


def encode_action(row: int, col: int, color: str, color_map: Optional[Sequence[int]] = None,
                  grid_size: int = GRID_SIZE) -> int:
    if color not in COLORS:
        raise ValueError(f"unknown color {color!r}")
    slot = COLORS.index(color)
    if color_map and slot < len(color_map):
        slot = color_map[slot]
    return (grid_size - 1 - row) * grid_size * NUM_COLORS + col * NUM_COLORS + slot


def decode_trace(actions: List[int], color_map: Optional[Sequence[int]] = None,
                 grid_size: int = GRID_SIZE) -> List[Action]:
    return [decode_action(a, color_map, grid_size) for a in actions]
