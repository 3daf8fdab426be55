from cookies.events.bus import EventBus, EVENT_MOUSE_PRESS, EVENT_TILE_CLICK
from cookies.ui.layout import cell_at_point

# Arcade reports the left mouse button as 1.
LEFT_MOUSE_BUTTON = 1


class InputSystem:
    """Maps window mouse presses to board tile clicks."""

    def __init__(self, event_bus: EventBus, window, board_size_provider):
        self.event_bus = event_bus
        self.window = window
        self._board_size = board_size_provider
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        # Other buttons fall through; the turn system listens to EVENT_MOUSE_PRESS for right-click.
        if kwargs.get('button') != LEFT_MOUSE_BUTTON:
            return
        size = self._board_size()
        if not size:
            return
        cell = cell_at_point(x, y, self.window.width, self.window.height, size)
        if cell is None:
            return
        row, col = cell
        self.event_bus.emit(EVENT_TILE_CLICK, row=row, col=col)
