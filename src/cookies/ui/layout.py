from typing import Optional, Tuple

from cookies.constants import (
    BOARD_MAX_HEIGHT_PCT,
    BOARD_MAX_WIDTH_PCT,
    BOTTOM_MARGIN,
    HUD_HEIGHT,
)

MIN_TILE_SIZE = 20


def compute_board_geometry(window_width: int, window_height: int, size: int):
    """Return (tile_size, start_x, start_y) for a size x size board.

    start_x/start_y are the lower-left corner of the board in window coordinates.
    Shared by RenderSystem and InputSystem so clicks map to the drawn cells.
    """
    max_board_w = window_width * BOARD_MAX_WIDTH_PCT
    max_board_h = (window_height - BOTTOM_MARGIN - HUD_HEIGHT) * BOARD_MAX_HEIGHT_PCT
    tile_size = int(min(max_board_w / size, max_board_h / size))
    if tile_size < MIN_TILE_SIZE:
        tile_size = MIN_TILE_SIZE
    total_width = size * tile_size
    start_x = (window_width - total_width) / 2
    start_y = BOTTOM_MARGIN
    return tile_size, start_x, start_y


def cell_origin(row: int, col: int, window_width: int, window_height: int, size: int) -> Tuple[float, float]:
    """Lower-left corner of a cell. Row 0 is drawn at the top of the board."""
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, size)
    x = start_x + col * tile_size
    y = start_y + (size - 1 - row) * tile_size
    return x, y


def cell_at_point(x: float, y: float, window_width: int, window_height: int, size: int) -> Optional[Tuple[int, int]]:
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, size)
    col = int((x - start_x) // tile_size)
    row_from_bottom = int((y - start_y) // tile_size)
    if not (0 <= col < size and 0 <= row_from_bottom < size):
        return None
    return size - 1 - row_from_bottom, col
