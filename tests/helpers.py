from __future__ import annotations

import random
from collections import deque
from typing import Iterable, Sequence

from esper import World

from cookies.config import GameConfig
from cookies.factories.token_factory import TokenFactory
from cookies.snapshots import Token
from cookies.systems.board_ops import load_grid
from cookies.world import create_world

TYPES = ['pink', 'purple', 'blue', 'yellow', 'orange']


class ScriptedTokenFactory(TokenFactory):
    """Hands out queued type names, then unique filler types that never match anything."""

    def __init__(self, script: Iterable[str] = ()):
        super().__init__(TYPES, random.Random(0))
        self.queue: deque[str] = deque(script)
        self.created: list[tuple[int, int]] = []
        self._filler = 0

    def create(self, row: int, col: int) -> Token:
        self.created.append((row, col))
        if self.queue:
            return Token(type_name=self.queue.popleft(), row=row, col=col)
        self._filler += 1
        return Token(type_name=f"filler-{self._filler}", row=row, col=col)


class ConstantTokenFactory(TokenFactory):
    """Always produces the same type, so every refill keeps matching."""

    def __init__(self, type_name: str = 'pink'):
        super().__init__([type_name], random.Random(0))


def no_match_layout(size: int = 6, types: Sequence[str] = TYPES) -> list[list[str]]:
    """Layout where no two orthogonal neighbours share a type."""
    return [[types[(2 * row + col) % len(types)] for col in range(size)] for row in range(size)]


def make_world(
    layout: Sequence[Sequence[str]] | None = None,
    *,
    config: GameConfig | None = None,
    factory: TokenFactory | None = None,
) -> World:
    config = config or GameConfig()
    world = create_world(config, rng=random.Random(1234), factory=factory or ScriptedTokenFactory())
    load_grid(world, layout if layout is not None else no_match_layout(config.grid_size))
    return world


def has_line_of_three(type_rows: Sequence[Sequence[str]]) -> bool:
    """Brute-force check used to cross-validate the match detector."""
    size = len(type_rows)
    for r in range(size):
        for c in range(size - 2):
            if type_rows[r][c] == type_rows[r][c + 1] == type_rows[r][c + 2]:
                return True
    for c in range(size):
        for r in range(size - 2):
            if type_rows[r][c] == type_rows[r + 1][c] == type_rows[r + 2][c]:
                return True
    return False


class LayoutTokenFactory(ScriptedTokenFactory):
    """Deals a fixed layout on the first request per cell, then unique fillers."""

    def __init__(self, layout: Sequence[Sequence[str]]):
        super().__init__()
        self.layout = [list(row) for row in layout]
        self._dealt: set[tuple[int, int]] = set()

    def create(self, row: int, col: int) -> Token:
        if (row, col) not in self._dealt:
            self._dealt.add((row, col))
            self.created.append((row, col))
            return Token(type_name=self.layout[row][col], row=row, col=col)
        return super().create(row, col)
