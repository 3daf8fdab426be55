"""Game configuration with defaults taken from ``cookies.constants``."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Optional

from cookies.constants import (
    GRID_SIZE,
    MAX_CASCADE_STEPS,
    MIN_RUN_LENGTH,
    MIN_TOKEN_TYPES,
    MOVE_BUDGET,
    PHASE_DELAY,
    POINTS_PER_TOKEN,
    STEP_DELAY,
    SWAP_DELAY,
    TOKEN_PALETTE,
    TOKEN_TYPE_COUNT,
)


@dataclass(frozen=True, slots=True)
class GameConfig:
    """Tunables for one game.

    Attributes:
        grid_size: side length of the square board
        type_count: how many token types are spawnable
        move_budget: accepted swaps available per game
        points_per_token: flat reward per cleared token
        swap_delay: pause between an accepted swap and the first detection
        phase_delay: pause between marking matches and compacting columns
        step_delay: pause between successive cascade steps
        max_cascade_steps: defensive cap on steps per swap
        seed: optional seed for the token RNG
    """
    grid_size: int = GRID_SIZE
    type_count: int = TOKEN_TYPE_COUNT
    move_budget: int = MOVE_BUDGET
    points_per_token: int = POINTS_PER_TOKEN
    swap_delay: float = SWAP_DELAY
    phase_delay: float = PHASE_DELAY
    step_delay: float = STEP_DELAY
    max_cascade_steps: int = MAX_CASCADE_STEPS
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.grid_size < MIN_RUN_LENGTH:
            raise ValueError(f"grid_size must be at least {MIN_RUN_LENGTH}, got {self.grid_size}")
        if not MIN_TOKEN_TYPES <= self.type_count <= len(TOKEN_PALETTE):
            raise ValueError(
                f"type_count must be between {MIN_TOKEN_TYPES} and {len(TOKEN_PALETTE)}, got {self.type_count}"
            )
        if self.move_budget < 0:
            raise ValueError(f"move_budget must be non-negative, got {self.move_budget}")
        if self.points_per_token < 0:
            raise ValueError(f"points_per_token must be non-negative, got {self.points_per_token}")
        for name in ("swap_delay", "phase_delay", "step_delay"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.max_cascade_steps < 1:
            raise ValueError("max_cascade_steps must be positive")

    def spawnable_types(self) -> list[str]:
        return list(TOKEN_PALETTE)[: self.type_count]

    def with_overrides(self, **overrides: Any) -> GameConfig:
        """Return a copy with the non-None overrides applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown config option(s): {', '.join(sorted(unknown))}")
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        return replace(self, **changes)
