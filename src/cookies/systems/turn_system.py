from __future__ import annotations

import logging
from typing import Generator, Optional, Tuple

from esper import World

from cookies.components.session_state import Phase, SessionState
from cookies.config import GameConfig
from cookies.errors import InternalInvariantViolation, InvalidPosition
from cookies.events.bus import (
    EventBus,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GAME_ABORTED,
    EVENT_GAME_OVER,
    EVENT_GRID_SNAPSHOT,
    EVENT_INVALID_POSITION,
    EVENT_MATCH_FOUND,
    EVENT_MOUSE_PRESS,
    EVENT_MOVE_CONSUMED,
    EVENT_REFILL_COMPLETED,
    EVENT_SCORE_CHANGED,
    EVENT_SESSION_CHANGED,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAPPED,
)
from cookies.snapshots import FRAME_MARKED, CascadeFrame, ResolutionResult, SessionSnapshot
from cookies.systems.board_ops import (
    get_session_state,
    get_token_factory,
    is_adjacent,
    require_in_bounds,
    snapshot_grid,
    swap_tokens,
)
from cookies.systems.cascade import iter_cascade

logger = logging.getLogger(__name__)

Position = Tuple[int, int]

# Arcade reports the right mouse button as 4 (arcade.MOUSE_BUTTON_RIGHT).
RIGHT_MOUSE_BUTTON = 4


class TurnSystem:
    """Gates player input and drives one cascade per accepted swap.

    Flow:
      - IDLE + tap selects a cell (AWAITING_SECOND_TAP).
      - A second tap on an orthogonal neighbour swaps, consumes a move and enters
        RESOLVING; any other second tap just moves the selection.
      - Cascade steps run as continuations on the injected clock. When the board
        settles the score delta is applied and the phase becomes IDLE, or
        GAME_OVER once the move budget is spent.
      - Taps during RESOLVING or GAME_OVER are ignored.
    """

    def __init__(self, world: World, event_bus: EventBus, clock):
        self.world = world
        self.event_bus = event_bus
        self.clock = clock
        self._generation = 0
        self._steps: Optional[Generator[CascadeFrame, None, ResolutionResult]] = None
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self._settle_initial_phase()

    @property
    def config(self) -> GameConfig:
        return getattr(self.world, "config", None) or GameConfig()

    def attach(self, world: World) -> None:
        """Switch to a freshly built world, discarding any in-flight cascade."""
        self.abandon()
        self.world = world
        self._settle_initial_phase()

    def abandon(self) -> None:
        if self._steps is not None:
            logger.info("Abandoning in-flight cascade")
        self._generation += 1
        self._steps = None
        self.clock.cancel_all()

    @property
    def resolving(self) -> bool:
        return self._steps is not None

    def session(self, error: str | None = None) -> SessionSnapshot:
        return SessionSnapshot.from_state(self._state(), error=error)

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.select_cell(row, col)

    def on_mouse_press(self, sender, **kwargs):
        # Right-click clears the current selection.
        if kwargs.get('button') != RIGHT_MOUSE_BUTTON:
            return
        self.deselect(reason='right_click')

    def select_cell(self, row: int, col: int) -> SessionSnapshot:
        pos = (row, col)
        try:
            require_in_bounds(self.world, pos)
        except InvalidPosition as exc:
            logger.debug("Rejected tap: %s", exc)
            self.event_bus.emit(EVENT_INVALID_POSITION, row=row, col=col)
            return self.session(error="invalid_position")

        state = self._state()
        if state.phase in (Phase.RESOLVING, Phase.GAME_OVER):
            logger.debug("Ignoring tap at %s during %s", pos, state.phase.name)
            return self.session()

        if state.selection is None:
            self._select(state, pos)
        elif is_adjacent(state.selection, pos):
            self._accept_swap(state, state.selection, pos)
        else:
            self._select(state, pos)
        return self.session()

    def deselect(self, reason: str = 'request') -> SessionSnapshot:
        state = self._state()
        if state.phase is not Phase.AWAITING_SECOND_TAP or state.selection is None:
            return self.session()
        prev = state.selection
        state.selection = None
        state.phase = Phase.IDLE
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason, prev_row=prev[0], prev_col=prev[1])
        self._emit_session()
        return self.session()

    def _select(self, state: SessionState, pos: Position) -> None:
        state.selection = pos
        state.phase = Phase.AWAITING_SECOND_TAP
        self.event_bus.emit(EVENT_TILE_SELECTED, row=pos[0], col=pos[1])
        self._emit_session()

    def _accept_swap(self, state: SessionState, src: Position, dst: Position) -> None:
        # Subscribers may restart the game from inside any emit below.
        world = self.world
        generation = self._generation
        swap_tokens(world, src, dst)
        state.moves_remaining = max(0, state.moves_remaining - 1)
        state.selection = None
        state.phase = Phase.RESOLVING
        logger.debug("Swapped %s <-> %s, %d moves left", src, dst, state.moves_remaining)
        try:
            grid = snapshot_grid(world)
        except InternalInvariantViolation as exc:
            self._abort(exc)
            return
        self.event_bus.emit(EVENT_TILE_SWAPPED, src=src, dst=dst, grid=grid)
        if self._stale(generation):
            return
        self.event_bus.emit(EVENT_MOVE_CONSUMED, moves_remaining=state.moves_remaining)
        if self._stale(generation):
            return
        self._emit_session()
        if self._stale(generation):
            return

        config = self.config
        self._steps = iter_cascade(
            world,
            get_token_factory(world),
            points_per_token=config.points_per_token,
            max_steps=config.max_cascade_steps,
        )
        self.clock.schedule(config.swap_delay, lambda: self._advance(generation))

    def _advance(self, generation: int) -> None:
        if self._stale(generation) or self._steps is None:
            return
        try:
            frame = next(self._steps)
        except StopIteration as stop:
            self._steps = None
            self._finish(stop.value, generation)
            return
        except InternalInvariantViolation as exc:
            self._abort(exc)
            return
        self._publish(frame)
        if self._stale(generation):
            return
        config = self.config
        delay = config.phase_delay if frame.kind == FRAME_MARKED else config.step_delay
        self.clock.schedule(delay, lambda: self._advance(generation))

    def _publish(self, frame: CascadeFrame) -> None:
        positions = list(frame.positions)
        if frame.kind == FRAME_MARKED:
            self.event_bus.emit(
                EVENT_CASCADE_STEP, depth=frame.depth, cleared=len(positions), score_delta=frame.score_delta
            )
            self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), depth=frame.depth)
        else:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=positions, depth=frame.depth)
        self.event_bus.emit(EVENT_GRID_SNAPSHOT, frame=frame)

    def _finish(self, result: ResolutionResult, generation: int) -> None:
        state = self._state()
        delta = max(0, result.total_score_delta)
        state.score += delta
        state.phase = Phase.GAME_OVER if state.moves_remaining == 0 else Phase.IDLE
        if delta:
            self.event_bus.emit(EVENT_SCORE_CHANGED, score=state.score, delta=delta)
            if self._stale(generation):
                return
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=result.steps, score_delta=delta)
        if self._stale(generation):
            return
        if state.phase is Phase.GAME_OVER:
            logger.info("Game over with score %d", state.score)
            self.event_bus.emit(EVENT_GAME_OVER, score=state.score)
            if self._stale(generation):
                return
        self._emit_session()

    def _abort(self, exc: InternalInvariantViolation) -> None:
        logger.error("Aborting game: %s", exc, exc_info=exc)
        self._generation += 1
        self._steps = None
        self.clock.cancel_all()
        state = self._state()
        state.selection = None
        state.phase = Phase.GAME_OVER
        state.aborted = True
        self.event_bus.emit(EVENT_GAME_ABORTED, reason=str(exc))
        self._emit_session()

    def _settle_initial_phase(self) -> None:
        state = self._state()
        if state.moves_remaining == 0 and state.phase is not Phase.GAME_OVER:
            state.phase = Phase.GAME_OVER

    def _emit_session(self) -> None:
        self.event_bus.emit(EVENT_SESSION_CHANGED, session=self.session())

    def _state(self) -> SessionState:
        return get_session_state(self.world)

    def _stale(self, generation: int) -> bool:
        """True once a restart or abort has moved on from the given generation."""
        return generation != self._generation
