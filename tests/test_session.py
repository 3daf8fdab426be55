import random

import pytest

from cookies.components.session_state import Phase
from cookies.config import GameConfig
from cookies.events.bus import (
    EventBus,
    EVENT_GAME_STARTED,
    EVENT_GRID_SNAPSHOT,
    EVENT_RESTART_REQUEST,
    EVENT_SCORE_CHANGED,
    EVENT_TICK,
    EVENT_TILE_SWAPPED,
)
from cookies.snapshots import FRAME_COMPACTED, FRAME_MARKED
from cookies.session import GameSession
from cookies.systems.board_ops import load_grid
from cookies.systems.clock import TickClock
from cookies.systems.match import find_matches
from tests.helpers import LayoutTokenFactory, ScriptedTokenFactory, no_match_layout


def productive_layout():
    layout = no_match_layout()
    layout[5][0] = 'red'
    layout[5][1] = 'red'
    layout[5][2] = 'green'
    layout[5][3] = 'red'
    return layout


def scripted_session(**kwargs):
    return GameSession(factory_builder=lambda config, rng: ScriptedTokenFactory(), **kwargs)


def test_start_game_returns_fresh_snapshots():
    game = GameSession(GameConfig(seed=11))
    started = []
    game.event_bus.subscribe(EVENT_GAME_STARTED, lambda sender, **payload: started.append(payload))
    session, grid = game.start_game()
    assert session.score == 0
    assert session.moves_remaining == 30
    assert session.phase is Phase.IDLE
    assert session.selection is None
    assert grid.size == 6
    assert started and started[0]["grid"] == grid


def test_start_game_overrides_size_and_budget():
    game = GameSession()
    session, grid = game.start_game(size=8, move_budget=12, points_per_token=5)
    assert grid.size == 8
    assert session.moves_remaining == 12
    assert game.config.points_per_token == 5


def test_same_seed_deals_same_board():
    _, first = GameSession(GameConfig(seed=99)).start_game()
    _, second = GameSession(GameConfig(seed=99)).start_game()
    assert first == second


def test_select_cell_before_start_raises():
    with pytest.raises(RuntimeError):
        GameSession().select_cell((0, 0))


def test_subscribers_receive_two_frames_per_step():
    game = scripted_session()
    game.start_game()
    load_grid(game.world, productive_layout())
    frames = []
    game.subscribe(frames.append)

    game.select_cell((5, 2))
    session = game.select_cell((5, 3))

    assert [frame.kind for frame in frames] == [FRAME_MARKED, FRAME_COMPACTED]
    assert frames[-1].grid == game.grid()
    assert session.score == 30


def test_invalid_position_surfaces_error_indicator():
    game = scripted_session()
    game.start_game()
    session = game.select_cell((10, 0))
    assert session.error == "invalid_position"
    assert session.phase is Phase.IDLE


def test_restart_discards_in_flight_cascade():
    bus = EventBus()
    game = GameSession(
        event_bus=bus,
        clock=TickClock(bus),
        factory_builder=lambda config, rng: ScriptedTokenFactory(),
    )
    game.start_game()
    old_world = game.world
    load_grid(old_world, productive_layout())
    frames = []
    bus.subscribe(EVENT_GRID_SNAPSHOT, lambda sender, **payload: frames.append(payload["frame"]))

    game.select_cell((5, 2))
    assert game.select_cell((5, 3)).phase is Phase.RESOLVING

    session, grid = game.restart()
    assert game.world is not old_world
    assert session.phase is Phase.IDLE
    assert session.score == 0
    assert session.moves_remaining == 30
    assert game.clock.pending == 0

    for _ in range(40):
        bus.emit(EVENT_TICK, dt=0.05)
    assert frames == []
    assert game.session().score == 0
    assert game.grid() == grid


def test_restart_after_game_over():
    game = scripted_session()
    game.start_game(move_budget=1)
    game.select_cell((0, 0))
    assert game.select_cell((0, 1)).phase is Phase.GAME_OVER
    session, _ = game.restart()
    assert session.phase is Phase.IDLE
    assert session.moves_remaining == 1


def test_restart_request_event_restarts():
    game = scripted_session()
    game.start_game()
    game.select_cell((0, 0))
    game.select_cell((0, 1))
    assert game.session().moves_remaining == 29
    game.event_bus.emit(EVENT_RESTART_REQUEST)
    assert game.session().moves_remaining == 30


def test_score_never_decreases_over_random_play():
    game = GameSession(GameConfig(seed=3, type_count=4), rng=random.Random(3))
    game.start_game()
    picker = random.Random(8)
    last_score = 0
    last_moves = 30
    while not game.session().game_over:
        row, col = picker.randrange(6), picker.randrange(6)
        game.select_cell((row, col))
        neighbours = [(row + dr, col + dc) for dr, dc in ((0, 1), (1, 0), (0, -1), (-1, 0))]
        target = picker.choice([n for n in neighbours if 0 <= n[0] < 6 and 0 <= n[1] < 6])
        session = game.select_cell(target)
        assert session.score >= last_score
        assert session.moves_remaining == last_moves - 1
        assert session.moves_remaining >= 0
        last_score = session.score
        last_moves = session.moves_remaining
    assert last_moves == 0


def red_triple_layout():
    layout = no_match_layout()
    for col in (0, 1, 2):
        layout[5][col] = 'red'
    return layout


def test_restart_from_swap_listener_leaves_new_game_untouched():
    game = scripted_session()
    game.start_game()
    load_grid(game.world, productive_layout())
    restarted = []

    def restart_once(sender, **payload):
        if restarted:
            return
        restarted.append(True)
        game.restart()
        load_grid(game.world, red_triple_layout())

    game.event_bus.subscribe(EVENT_TILE_SWAPPED, restart_once)
    game.select_cell((5, 2))
    game.select_cell((5, 3))

    session = game.session()
    assert restarted
    assert session.score == 0
    assert session.moves_remaining == 30
    assert session.phase is Phase.IDLE
    assert find_matches(game.grid()) == {(5, 0), (5, 1), (5, 2)}


def test_restart_from_score_listener_starts_clean():
    game = scripted_session()
    game.start_game()
    load_grid(game.world, productive_layout())
    restarted = []

    def restart_once(sender, **payload):
        if not restarted:
            restarted.append(payload["score"])
            game.restart()

    game.event_bus.subscribe(EVENT_SCORE_CHANGED, restart_once)
    game.select_cell((5, 2))
    game.select_cell((5, 3))

    session = game.session()
    assert restarted == [30]
    assert session.score == 0
    assert session.moves_remaining == 30
    assert session.phase is Phase.IDLE


def test_dealt_runs_survive_start_and_score_after_first_swap():
    game = GameSession(factory_builder=lambda config, rng: LayoutTokenFactory(red_triple_layout()))
    session, grid = game.start_game()
    assert find_matches(grid) == {(5, 0), (5, 1), (5, 2)}
    assert session.score == 0

    game.select_cell((0, 0))
    session = game.select_cell((0, 1))

    assert session.score == 30
    assert session.moves_remaining == 29
    assert find_matches(game.grid()) == frozenset()
