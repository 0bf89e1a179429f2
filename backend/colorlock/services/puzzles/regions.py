from collections import deque
from typing import List, Set, Tuple

Cell = Tuple[int, int]
Grid = List[List[str]]


def find_region(grid: Grid, row: int, col: int) -> Set[Cell]:
    """Return every cell 4-connected to (row, col) that shares its color."""
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    if not (0 <= row < rows and 0 <= col < cols):
        return set()
    color = grid[row][col]
    region = {(row, col)}
    queue = deque([(row, col)])
    while queue:
        r, c = queue.popleft()
        for dr, dc in ((0, 1), (1, 0), (0, -1), (-1, 0)):
            nr, nc = r + dr, c + dc
            if 0 <= nr < rows and 0 <= nc < cols and (nr, nc) not in region and grid[nr][nc] == color:
                region.add((nr, nc))
                queue.append((nr, nc))
    return region


def largest_region(grid: Grid) -> Set[Cell]:
    """Largest region of the grid.

    Cells are scanned row-major; on equal sizes the region met first in the
    scan wins.
    """
    seen: Set[Cell] = set()
    largest: Set[Cell] = set()
    for r, line in enumerate(grid):
        for c in range(len(line)):
            if (r, c) in seen:
                continue
            region = find_region(grid, r, c)
            seen |= region
            if len(region) > len(largest):
                largest = region
    return largest


def is_unified(grid: Grid) -> bool:
    if not grid or not grid[0]:
        return True
    first = grid[0][0]
    return all(cell == first for line in grid for cell in line)


def recolor(grid: Grid, row: int, col: int, color: str) -> Tuple[Grid, Set[Cell]]:
    """Copy of the grid with the region at (row, col) painted ``color``."""
    region = find_region(grid, row, col)
    painted = [list(line) for line in grid]
    for r, c in region:
        painted[r][c] = color
    return painted, region
