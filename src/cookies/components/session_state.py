"""Session state resource: score, move budget, selection and turn phase."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple


class Phase(Enum):
    """Turn phases gating player input."""
    IDLE = auto()
    AWAITING_SECOND_TAP = auto()
    RESOLVING = auto()
    GAME_OVER = auto()


@dataclass(slots=True)
class SessionState:
    """Singleton component owned by the turn system for the lifetime of one game."""
    moves_remaining: int
    score: int = 0
    selection: Optional[Tuple[int, int]] = None
    phase: Phase = Phase.IDLE
    aborted: bool = False
