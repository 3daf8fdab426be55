from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps lambdas and bound methods of unreferenced systems alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                        # payload: dt=float


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"          # payload: x, y, button
EVENT_TILE_CLICK = "tile_click"            # payload: row, col
EVENT_RESTART_REQUEST = "restart_request"  # payload: None


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str, prev_row, prev_col
EVENT_TILE_SWAPPED = "tile_swapped"                # payload: src=(r,c), dst=(r,c), grid=GridSnapshot
EVENT_INVALID_POSITION = "invalid_position"        # payload: row, col
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(r,c),...], size=int, depth=int
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...], depth=int
EVENT_GRID_SNAPSHOT = "grid_snapshot"              # payload: frame=CascadeFrame
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, cleared=int, score_delta=int (running)
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, score_delta=int


# ============================================================================
# SESSION & GAME FLOW
# ============================================================================
EVENT_GAME_STARTED = "game_started"        # payload: session=SessionSnapshot, grid=GridSnapshot
EVENT_SESSION_CHANGED = "session_changed"  # payload: session=SessionSnapshot
EVENT_MOVE_CONSUMED = "move_consumed"      # payload: moves_remaining=int
EVENT_SCORE_CHANGED = "score_changed"      # payload: score=int, delta=int
EVENT_GAME_OVER = "game_over"              # payload: score=int
EVENT_GAME_ABORTED = "game_aborted"        # payload: reason=str
