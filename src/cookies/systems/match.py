from __future__ import annotations

from typing import FrozenSet, Iterable, List, Tuple

from cookies.constants import MIN_RUN_LENGTH
from cookies.snapshots import GridSnapshot, Token

Position = Tuple[int, int]
Run = Tuple[Position, ...]


def _runs_in_line(line: Iterable[Token], min_length: int) -> List[Run]:
    """Return maximal runs of equal, unmarked token types along one row or column."""
    runs: List[Run] = []
    run: List[Position] = []
    last_type = None
    for token in line:
        tval = None if token.marked else token.type_name
        if tval is not None and tval == last_type:
            run.append(token.position)
            continue
        if len(run) >= min_length:
            runs.append(tuple(run))
        run = [token.position] if tval is not None else []
        last_type = tval
    if len(run) >= min_length:
        runs.append(tuple(run))
    return runs


def find_runs(grid: GridSnapshot, min_length: int = MIN_RUN_LENGTH) -> List[Run]:
    """Detect every maximal horizontal or vertical run of length >= min_length.

    Horizontal runs come first (row by row), then vertical runs (column by column).
    A cell may appear in both a horizontal and a vertical run.
    """
    runs: List[Run] = []
    for row in grid.rows:
        runs.extend(_runs_in_line(row, min_length))
    for col in range(grid.size):
        runs.extend(_runs_in_line(grid.column(col), min_length))
    return runs


def find_matches(grid: GridSnapshot, min_length: int = MIN_RUN_LENGTH) -> FrozenSet[Position]:
    """Union of all run positions, deduplicated by (row, col)."""
    return frozenset(pos for run in find_runs(grid, min_length) for pos in run)
