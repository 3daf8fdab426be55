"""In-process API consumed by presentation adapters.

A GameSession owns the event bus, the clock and a single TurnSystem. Starting or
restarting a game builds a new world and hands it to the turn system, which
drops whatever cascade was still running against the old one.
"""
from __future__ import annotations

import logging
import random
from typing import Any, Callable, Optional, Tuple

from esper import World

from cookies.config import GameConfig
from cookies.events.bus import (
    EventBus,
    EVENT_GAME_STARTED,
    EVENT_GRID_SNAPSHOT,
    EVENT_RESTART_REQUEST,
)
from cookies.factories.token_factory import TokenFactory
from cookies.snapshots import CascadeFrame, GridSnapshot, SessionSnapshot
from cookies.systems.board_ops import snapshot_grid
from cookies.systems.clock import ImmediateClock
from cookies.systems.turn_system import TurnSystem
from cookies.world import create_world

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class GameSession:
    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        event_bus: EventBus | None = None,
        clock=None,
        rng: random.Random | None = None,
        factory_builder: Callable[[GameConfig, random.Random], TokenFactory] | None = None,
    ):
        self.config = config or GameConfig()
        self.event_bus = event_bus or EventBus()
        self.clock = clock if clock is not None else ImmediateClock()
        self._rng = rng
        self._factory_builder = factory_builder
        self.world: Optional[World] = None
        self.turn_system: Optional[TurnSystem] = None
        self.event_bus.subscribe(EVENT_RESTART_REQUEST, self.on_restart_request)

    def start_game(
        self,
        size: int | None = None,
        move_budget: int | None = None,
        **overrides: Any,
    ) -> Tuple[SessionSnapshot, GridSnapshot]:
        """Begin a new game, optionally overriding the configuration for this and later restarts."""
        self.config = self.config.with_overrides(grid_size=size, move_budget=move_budget, **overrides)
        return self._new_game()

    def restart(self) -> Tuple[SessionSnapshot, GridSnapshot]:
        logger.info("Restarting game")
        return self._new_game()

    def on_restart_request(self, sender, **kwargs):
        self.restart()

    def select_cell(self, position: Position) -> SessionSnapshot:
        row, col = position
        return self._require_turn_system().select_cell(row, col)

    def deselect(self) -> SessionSnapshot:
        return self._require_turn_system().deselect()

    def session(self) -> SessionSnapshot:
        return self._require_turn_system().session()

    def grid(self) -> GridSnapshot:
        if self.world is None:
            raise RuntimeError("No game in progress; call start_game first")
        return snapshot_grid(self.world, allow_marked=True)

    def subscribe(self, callback: Callable[[CascadeFrame], None]) -> None:
        """Receive every cascade frame (post-mark and post-compact) as it is produced."""
        self.event_bus.subscribe(EVENT_GRID_SNAPSHOT, lambda sender, **payload: callback(payload['frame']))

    def _new_game(self) -> Tuple[SessionSnapshot, GridSnapshot]:
        rng = self._rng or random.Random(self.config.seed)
        factory = self._factory_builder(self.config, rng) if self._factory_builder else None
        world = create_world(self.config, rng=rng, factory=factory)
        self.world = world
        if self.turn_system is None:
            self.turn_system = TurnSystem(world, self.event_bus, self.clock)
        else:
            self.turn_system.attach(world)
        session = self.turn_system.session()
        grid = snapshot_grid(world)
        logger.info(
            "Started %dx%d game with %d moves",
            self.config.grid_size,
            self.config.grid_size,
            session.moves_remaining,
        )
        self.event_bus.emit(EVENT_GAME_STARTED, session=session, grid=grid)
        return session, grid

    def _require_turn_system(self) -> TurnSystem:
        if self.turn_system is None:
            raise RuntimeError("No game in progress; call start_game first")
        return self.turn_system
