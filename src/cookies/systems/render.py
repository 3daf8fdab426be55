from typing import Dict, Optional, Tuple

from cookies.components.session_state import Phase
from cookies.components.token_types import TokenTypes
from cookies.constants import TILE_PADDING, TOKEN_PALETTE
from cookies.events.bus import (
    EventBus,
    EVENT_GAME_STARTED,
    EVENT_GRID_SNAPSHOT,
    EVENT_SESSION_CHANGED,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAPPED,
)
from cookies.snapshots import GridSnapshot, SessionSnapshot
from cookies.ui.layout import compute_board_geometry, cell_origin

BACKGROUND = (45, 27, 78)
MARKED_TINT = (255, 255, 255)
SELECTION_OUTLINE = (255, 255, 255)
HUD_SCORE_COLOR = (250, 204, 21)
HUD_MOVES_COLOR = (244, 114, 182)


class RenderSystem:
    """Draws the latest grid and session snapshots into an arcade window.

    Holds no game state of its own: everything it shows arrives through bus events.
    """
    def __init__(self, event_bus: EventBus, window):
        self.event_bus = event_bus
        self.window = window
        self.palette = TokenTypes(types=dict(TOKEN_PALETTE))
        self.grid: Optional[GridSnapshot] = None
        self.session: Optional[SessionSnapshot] = None
        self.selected: Optional[Tuple[int, int]] = None
        self._last_tile_layout: Dict[Tuple[int, int], Tuple[float, float, int, str, bool]] = {}
        self.event_bus.subscribe(EVENT_GAME_STARTED, self.on_game_started)
        self.event_bus.subscribe(EVENT_GRID_SNAPSHOT, self.on_grid_snapshot)
        self.event_bus.subscribe(EVENT_TILE_SWAPPED, self.on_tile_swapped)
        self.event_bus.subscribe(EVENT_SESSION_CHANGED, self.on_session_changed)
        self.event_bus.subscribe(EVENT_TILE_SELECTED, self.on_tile_selected)
        self.event_bus.subscribe(EVENT_TILE_DESELECTED, self.on_tile_deselected)

    def on_game_started(self, sender, **kwargs):
        self.grid = kwargs.get('grid')
        self.session = kwargs.get('session')
        self.selected = None

    def on_grid_snapshot(self, sender, **kwargs):
        frame = kwargs.get('frame')
        if frame is not None:
            self.grid = frame.grid

    def on_tile_swapped(self, sender, **kwargs):
        grid = kwargs.get('grid')
        if grid is not None:
            self.grid = grid
        self.selected = None

    def on_session_changed(self, sender, **kwargs):
        session = kwargs.get('session')
        if session is None:
            return
        self.session = session
        self.selected = session.selection

    def on_tile_selected(self, sender, **kwargs):
        self.selected = (kwargs.get('row'), kwargs.get('col'))

    def on_tile_deselected(self, sender, **kwargs):
        self.selected = None

    def tile_layout(self) -> Dict[Tuple[int, int], Tuple[float, float, int, str, bool]]:
        """Position -> (left, bottom, tile_size, type_name, marked) for the current grid."""
        layout = {}
        if self.grid is None:
            return layout
        size = self.grid.size
        tile_size, _, _ = compute_board_geometry(self.window.width, self.window.height, size)
        for token in self.grid:
            left, bottom = cell_origin(token.row, token.col, self.window.width, self.window.height, size)
            layout[token.position] = (left, bottom, tile_size, token.type_name, token.marked)
        return layout

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        try:
            arcade.get_window()
        except RuntimeError:
            return
        self._last_tile_layout = self.tile_layout()
        if self._last_tile_layout:
            tile_size = next(iter(self._last_tile_layout.values()))[2]
            self._draw_board(arcade, tile_size)
        self._draw_hud(arcade)

    def _draw_board(self, arcade, tile_size: int) -> None:
        pad = TILE_PADDING
        for (row, col), (left, bottom, size, type_name, marked) in self._last_tile_layout.items():
            color = MARKED_TINT if marked else self.palette.background_for(type_name)
            arcade.draw_lrbt_rectangle_filled(left + pad, left + size - pad, bottom + pad, bottom + size - pad, color)
            if self.selected == (row, col):
                arcade.draw_lrbt_rectangle_outline(
                    left + pad, left + size - pad, bottom + pad, bottom + size - pad, SELECTION_OUTLINE, 4
                )
            if not marked:
                arcade.draw_text(
                    self.palette.glyph_for(type_name),
                    left + size / 2,
                    bottom + size / 2,
                    arcade.color.WHITE,
                    int(tile_size * 0.45),
                    anchor_x="center",
                    anchor_y="center",
                )

    def _draw_hud(self, arcade) -> None:
        session = self.session
        if session is None:
            return
        top = self.window.height - 50
        arcade.draw_text(f"Score: {session.score}", 30, top, HUD_SCORE_COLOR, 24, bold=True)
        arcade.draw_text(
            f"Moves: {session.moves_remaining}", self.window.width - 30, top, HUD_MOVES_COLOR, 24,
            anchor_x="right", bold=True,
        )
        if session.phase is Phase.GAME_OVER:
            title = "Game aborted" if session.aborted else "Game over!"
            arcade.draw_text(
                f"{title} Score: {session.score}  (press R to play again)",
                self.window.width / 2,
                top - 40,
                arcade.color.WHITE,
                18,
                anchor_x="center",
            )
