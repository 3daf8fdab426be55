"""Immutable views handed to the presentation layer and to tests."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

from cookies.components.session_state import Phase, SessionState

Position = Tuple[int, int]

FRAME_MARKED = "marked"
FRAME_COMPACTED = "compacted"


@dataclass(frozen=True, slots=True)
class Token:
    """One cell's typed game piece at a given position."""
    type_name: str
    row: int
    col: int
    marked: bool = False

    @property
    def position(self) -> Position:
        return (self.row, self.col)


@dataclass(frozen=True, slots=True)
class GridSnapshot:
    """Row-major, square grid of tokens. Row 0 is the top row."""
    rows: Tuple[Tuple[Token, ...], ...]

    @classmethod
    def from_types(cls, type_rows: Sequence[Sequence[str]]) -> GridSnapshot:
        size = len(type_rows)
        if any(len(row) != size for row in type_rows):
            raise ValueError("Grid must be square")
        return cls(
            rows=tuple(
                tuple(Token(type_name, r, c) for c, type_name in enumerate(row))
                for r, row in enumerate(type_rows)
            )
        )

    @property
    def size(self) -> int:
        return len(self.rows)

    def token_at(self, row: int, col: int) -> Token:
        return self.rows[row][col]

    def column(self, col: int) -> Tuple[Token, ...]:
        return tuple(row[col] for row in self.rows)

    def marked_positions(self) -> list[Position]:
        return [token.position for token in self if token.marked]

    def __iter__(self) -> Iterator[Token]:
        for row in self.rows:
            yield from row


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    score: int
    moves_remaining: int
    selection: Optional[Position]
    phase: Phase
    aborted: bool = False
    error: Optional[str] = None

    @classmethod
    def from_state(cls, state: SessionState, error: Optional[str] = None) -> SessionSnapshot:
        return cls(
            score=state.score,
            moves_remaining=state.moves_remaining,
            selection=state.selection,
            phase=state.phase,
            aborted=state.aborted,
            error=error,
        )

    @property
    def game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER


@dataclass(frozen=True, slots=True)
class CascadeFrame:
    """Snapshot emitted between cascade phases.

    kind is FRAME_MARKED (matched cells flagged, not yet removed) or FRAME_COMPACTED
    (columns shifted and refilled). positions holds the matched cells for a marked
    frame and the refilled cells for a compacted frame. score_delta is the running
    total for the current resolution.
    """
    kind: str
    depth: int
    grid: GridSnapshot
    positions: Tuple[Position, ...]
    score_delta: int


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    final_grid: GridSnapshot
    total_score_delta: int
    steps: int = 0
    cleared: int = 0
