"""Cascade resolution: detect, mark, compact and refill until the board is stable.

``iter_cascade`` is a generator so callers can pause between phases (the turn
system schedules each ``next()`` on its clock); ``resolve`` drains it in one go.
"""
from __future__ import annotations

import logging
from typing import Generator, List, Tuple

from esper import World

from cookies.constants import MAX_CASCADE_STEPS, POINTS_PER_TOKEN
from cookies.errors import InternalInvariantViolation
from cookies.factories.token_factory import TokenFactory
from cookies.snapshots import FRAME_COMPACTED, FRAME_MARKED, CascadeFrame, ResolutionResult
from cookies.systems.board_ops import compact_column, get_token_factory, mark_matched, snapshot_grid
from cookies.systems.match import find_matches

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


def iter_cascade(
    world: World,
    factory: TokenFactory | None = None,
    *,
    points_per_token: int = POINTS_PER_TOKEN,
    max_steps: int = MAX_CASCADE_STEPS,
) -> Generator[CascadeFrame, None, ResolutionResult]:
    """Yield a marked frame and a compacted frame per step; return the ResolutionResult."""
    factory = factory or get_token_factory(world)
    total = 0
    cleared = 0
    depth = 0
    while True:
        grid = snapshot_grid(world)
        matched = find_matches(grid)
        if not matched:
            break
        if depth >= max_steps:
            raise InternalInvariantViolation(f"Cascade did not settle within {max_steps} steps")
        depth += 1
        marked = mark_matched(world, matched)
        cleared += len(marked)
        total += len(marked) * points_per_token
        logger.debug("Cascade step %d cleared %d tokens (running delta %d)", depth, len(marked), total)
        yield CascadeFrame(
            kind=FRAME_MARKED,
            depth=depth,
            grid=snapshot_grid(world, allow_marked=True),
            positions=tuple(marked),
            score_delta=total,
        )
        # Only columns holding marks are touched.
        refilled: List[Position] = []
        for col in sorted({c for _, c in marked}):
            refilled.extend(compact_column(world, col, factory).new_tiles)
        yield CascadeFrame(
            kind=FRAME_COMPACTED,
            depth=depth,
            grid=snapshot_grid(world),
            positions=tuple(sorted(refilled)),
            score_delta=total,
        )
    return ResolutionResult(final_grid=grid, total_score_delta=total, steps=depth, cleared=cleared)


def resolve(
    world: World,
    factory: TokenFactory | None = None,
    *,
    points_per_token: int = POINTS_PER_TOKEN,
    max_steps: int = MAX_CASCADE_STEPS,
) -> ResolutionResult:
    """Run the cascade to its fixed point without pausing."""
    steps = iter_cascade(world, factory, points_per_token=points_per_token, max_steps=max_steps)
    while True:
        try:
            next(steps)
        except StopIteration as stop:
            return stop.value
