import pytest

from cookies.components.board_position import BoardPosition
from cookies.components.clear_mark import ClearMark
from cookies.config import GameConfig
from cookies.errors import InternalInvariantViolation, InvalidPosition
from cookies.systems.board_ops import (
    compact_column,
    get_session_state,
    is_adjacent,
    load_grid,
    mark_matched,
    marked_columns,
    snapshot_grid,
    swap_tokens,
)
from cookies.world import create_world
from tests.helpers import ScriptedTokenFactory, make_world, no_match_layout


def test_create_world_fills_every_cell_and_resets_session():
    world = create_world(GameConfig(grid_size=6, move_budget=12, seed=5))
    grid = snapshot_grid(world)
    assert grid.size == 6
    assert len(list(world.get_component(BoardPosition))) == 36
    assert all(token.type_name in GameConfig().spawnable_types() for token in grid)
    state = get_session_state(world)
    assert state.score == 0
    assert state.moves_remaining == 12
    assert state.selection is None


def test_is_adjacent():
    assert is_adjacent((0, 0), (0, 1))
    assert is_adjacent((0, 0), (1, 0))
    assert not is_adjacent((0, 0), (1, 1))
    assert not is_adjacent((0, 0), (2, 0))
    assert not is_adjacent((3, 3), (3, 3))


def test_swap_exchanges_tokens_and_positions():
    world = make_world()
    before = snapshot_grid(world)
    swap_tokens(world, (2, 1), (2, 2))
    after = snapshot_grid(world)
    assert after.token_at(2, 1).type_name == before.token_at(2, 2).type_name
    assert after.token_at(2, 2).type_name == before.token_at(2, 1).type_name
    assert after.token_at(2, 1).position == (2, 1)


def test_swap_does_not_check_adjacency():
    world = make_world()
    before = snapshot_grid(world)
    swap_tokens(world, (0, 0), (5, 5))
    after = snapshot_grid(world)
    assert after.token_at(0, 0).type_name == before.token_at(5, 5).type_name


@pytest.mark.parametrize("bad", [(-1, 0), (0, 6), (6, 6)])
def test_swap_out_of_bounds_raises_without_mutation(bad):
    world = make_world()
    before = snapshot_grid(world)
    with pytest.raises(InvalidPosition):
        swap_tokens(world, (0, 0), bad)
    assert snapshot_grid(world) == before


def test_compact_column_refills_top_after_top_run_removed():
    layout = no_match_layout()
    for row, type_name in enumerate(['red', 'red', 'red', 'blue', 'yellow', 'orange']):
        layout[row][0] = type_name
    factory = ScriptedTokenFactory()
    world = make_world(layout, factory=factory)
    factory.queue.extend(['green', 'pink', 'purple'])

    mark_matched(world, [(0, 0), (1, 0), (2, 0)])
    assert marked_columns(world) == [0]
    result = compact_column(world, 0, factory)

    column = [token.type_name for token in snapshot_grid(world).column(0)]
    assert column == ['green', 'pink', 'purple', 'blue', 'yellow', 'orange']
    assert result.new_tiles == [(0, 0), (1, 0), (2, 0)]
    assert result.moves == []


def test_compact_column_shifts_survivors_down_in_order():
    layout = no_match_layout()
    for row, type_name in enumerate(['pink', 'purple', 'red', 'red', 'red', 'orange']):
        layout[row][3] = type_name
    factory = ScriptedTokenFactory()
    world = make_world(layout, factory=factory)
    factory.queue.extend(['a', 'b', 'c'])

    mark_matched(world, [(2, 3), (3, 3), (4, 3)])
    result = compact_column(world, 3, factory)

    column = [token.type_name for token in snapshot_grid(world).column(3)]
    assert column == ['a', 'b', 'c', 'pink', 'purple', 'orange']
    assert [(move.source, move.target) for move in result.moves] == [((0, 3), (3, 3)), ((1, 3), (4, 3))]
    assert not any(world.component_for_entity(e, ClearMark).marked for e, _ in world.get_component(ClearMark))


def test_compact_column_leaves_other_columns_untouched():
    world = make_world()
    before = snapshot_grid(world)
    mark_matched(world, [(5, 1)])
    compact_column(world, 1)
    after = snapshot_grid(world)
    for col in (0, 2, 3, 4, 5):
        assert after.column(col) == before.column(col)


def test_compact_column_without_marks_is_stable():
    world = make_world()
    before = snapshot_grid(world)
    result = compact_column(world, 4)
    assert snapshot_grid(world) == before
    assert result.new_tiles == []


def test_snapshot_refuses_marked_cells_outside_clear_window():
    world = make_world()
    mark_matched(world, [(1, 1)])
    with pytest.raises(InternalInvariantViolation):
        snapshot_grid(world)
    grid = snapshot_grid(world, allow_marked=True)
    assert grid.marked_positions() == [(1, 1)]


def test_mark_matched_out_of_bounds():
    world = make_world()
    with pytest.raises(InvalidPosition):
        mark_matched(world, [(9, 9)])


def test_load_grid_requires_matching_size():
    world = make_world()
    with pytest.raises(ValueError):
        load_grid(world, no_match_layout(5))
