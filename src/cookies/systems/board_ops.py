from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from esper import World

from cookies.components.board import Board
from cookies.components.board_position import BoardPosition
from cookies.components.clear_mark import ClearMark
from cookies.components.session_state import SessionState
from cookies.components.tile import TileType
from cookies.components.token_type_registry import TokenTypeRegistry
from cookies.components.token_types import TokenTypes
from cookies.errors import InternalInvariantViolation, InvalidPosition
from cookies.factories.token_factory import TokenFactory
from cookies.snapshots import GridSnapshot, Token

Position = Tuple[int, int]


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    type_name: str


@dataclass(slots=True)
class ColumnCompaction:
    col: int
    moves: List[GravityMove]
    new_tiles: List[Position]


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise InternalInvariantViolation("Board component not found")


def get_session_state(world: World) -> SessionState:
    for _, state in world.get_component(SessionState):
        return state
    raise InternalInvariantViolation("SessionState component not found")


def get_token_registry(world: World) -> TokenTypes:
    for entity, _ in world.get_component(TokenTypeRegistry):
        return world.component_for_entity(entity, TokenTypes)
    raise InternalInvariantViolation("TokenTypes definitions not found")


def get_token_factory(world: World) -> TokenFactory:
    factory = getattr(world, "token_factory", None)
    if factory is None:
        factory = TokenFactory.from_registry(get_token_registry(world), getattr(world, "random", None))
        setattr(world, "token_factory", factory)
    return factory


def create_board(world: World, size: int) -> int:
    """Create the Board entity plus one empty-typed cell entity per position."""
    board_entity = world.create_entity(Board(size=size))
    for row in range(size):
        for col in range(size):
            world.create_entity(BoardPosition(row=row, col=col), TileType(type_name=""), ClearMark())
    return board_entity


def populate_board(world: World, factory: TokenFactory) -> None:
    """Fill every cell with a freshly generated token. No anti-match filtering."""
    for entity, position in world.get_component(BoardPosition):
        token = factory.create(position.row, position.col)
        world.component_for_entity(entity, TileType).type_name = token.type_name
        world.component_for_entity(entity, ClearMark).marked = False


def position_index(world: World) -> Dict[Position, int]:
    return {(pos.row, pos.col): entity for entity, pos in world.get_component(BoardPosition)}


def require_in_bounds(world: World, pos: Position) -> None:
    board = get_board(world)
    row, col = pos
    if not board.in_bounds(row, col):
        raise InvalidPosition(row, col, board.size)


def is_adjacent(a: Position, b: Position) -> bool:
    """True when a and b are orthogonal neighbours (Manhattan distance 1)."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def swap_tokens(world: World, src: Position, dst: Position) -> None:
    """Exchange the tokens at two in-bounds positions. No adjacency check."""
    require_in_bounds(world, src)
    require_in_bounds(world, dst)
    index = position_index(world)
    src_tile: TileType = world.component_for_entity(index[src], TileType)
    dst_tile: TileType = world.component_for_entity(index[dst], TileType)
    src_tile.type_name, dst_tile.type_name = dst_tile.type_name, src_tile.type_name


def mark_matched(world: World, positions: Iterable[Position]) -> List[Position]:
    """Flag cells as cleared without removing them yet."""
    index = position_index(world)
    marked: List[Position] = []
    for pos in sorted(set(positions)):
        entity = index.get(pos)
        if entity is None:
            raise InvalidPosition(pos[0], pos[1], get_board(world).size)
        world.component_for_entity(entity, ClearMark).marked = True
        marked.append(pos)
    return marked


def compact_column(world: World, col: int, factory: TokenFactory | None = None) -> ColumnCompaction:
    """Drop marked cells of one column, shift survivors down and refill the top.

    Survivors keep their relative order; the vacated top cells receive new tokens.
    """
    board = get_board(world)
    if not 0 <= col < board.size:
        raise InvalidPosition(0, col, board.size)
    factory = factory or get_token_factory(world)
    index = position_index(world)
    cells = [index[(row, col)] for row in range(board.size)]

    survivors: List[Tuple[int, str]] = []
    for row, entity in enumerate(cells):
        if not world.component_for_entity(entity, ClearMark).marked:
            survivors.append((row, world.component_for_entity(entity, TileType).type_name))

    vacated = board.size - len(survivors)
    moves: List[GravityMove] = []
    # Survivors settle at the bottom, top to bottom in their original order.
    for offset, (source_row, type_name) in enumerate(survivors):
        target_row = vacated + offset
        entity = cells[target_row]
        world.component_for_entity(entity, TileType).type_name = type_name
        world.component_for_entity(entity, ClearMark).marked = False
        if source_row != target_row:
            moves.append(GravityMove(source=(source_row, col), target=(target_row, col), type_name=type_name))

    new_tiles: List[Position] = []
    for row in range(vacated):
        token = factory.create(row, col)
        entity = cells[row]
        world.component_for_entity(entity, TileType).type_name = token.type_name
        world.component_for_entity(entity, ClearMark).marked = False
        new_tiles.append((row, col))
    return ColumnCompaction(col=col, moves=moves, new_tiles=new_tiles)


def marked_columns(world: World) -> List[int]:
    cols = {
        pos.col
        for entity, pos in world.get_component(BoardPosition)
        if world.component_for_entity(entity, ClearMark).marked
    }
    return sorted(cols)


def snapshot_grid(world: World, *, allow_marked: bool = False) -> GridSnapshot:
    """Build an immutable GridSnapshot of the live board.

    Raises InternalInvariantViolation for a missing cell or, unless allow_marked,
    for a cell still flagged as cleared.
    """
    board = get_board(world)
    index = position_index(world)
    rows: List[Tuple[Token, ...]] = []
    for row in range(board.size):
        cells: List[Token] = []
        for col in range(board.size):
            entity = index.get((row, col))
            if entity is None:
                raise InternalInvariantViolation(f"Cell ({row}, {col}) has no token")
            marked = world.component_for_entity(entity, ClearMark).marked
            if marked and not allow_marked:
                raise InternalInvariantViolation(f"Cell ({row}, {col}) is empty outside a clear step")
            type_name = world.component_for_entity(entity, TileType).type_name
            if not type_name:
                raise InternalInvariantViolation(f"Cell ({row}, {col}) has no token type")
            cells.append(Token(type_name=type_name, row=row, col=col, marked=marked))
        rows.append(tuple(cells))
    return GridSnapshot(rows=tuple(rows))


def load_grid(world: World, type_rows: Sequence[Sequence[str]]) -> None:
    """Overwrite the live board with explicit type names (row 0 first)."""
    board = get_board(world)
    if len(type_rows) != board.size or any(len(row) != board.size for row in type_rows):
        raise ValueError(f"Expected a {board.size}x{board.size} layout")
    index = position_index(world)
    for row, names in enumerate(type_rows):
        for col, type_name in enumerate(names):
            entity = index[(row, col)]
            world.component_for_entity(entity, TileType).type_name = type_name
            world.component_for_entity(entity, ClearMark).marked = False
