"""Entry point for the Cookie Run Kingdom match-three game.

Sets up the event bus, game session, presentation systems and Arcade window.
"""
import logging

from arcade import Window, run, key

from cookies.config import GameConfig
from cookies.constants import WINDOW_HEIGHT, WINDOW_TITLE, WINDOW_WIDTH
from cookies.events.bus import EVENT_MOUSE_PRESS, EVENT_RESTART_REQUEST, EVENT_TICK, EventBus
from cookies.session import GameSession
from cookies.systems.clock import TickClock
from cookies.systems.input import InputSystem
from cookies.systems.render import BACKGROUND, RenderSystem

logger = logging.getLogger(__name__)


class CookieWindow(Window):
    def __init__(self, config: GameConfig | None = None):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_TITLE, resizable=True)
        self.set_update_rate(1/60)
        self.event_bus = EventBus()
        # Cascade pauses advance with window updates.
        self.clock = TickClock(self.event_bus)
        self.session = GameSession(config, event_bus=self.event_bus, clock=self.clock)

        # Presentation systems subscribe before the first game starts so they see it.
        self.render_system = RenderSystem(self.event_bus, self)
        self.input_system = InputSystem(self.event_bus, self, lambda: self.session.config.grid_size)

        self.session.start_game()
        self.background_color = BACKGROUND

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol == key.R:
            self.event_bus.emit(EVENT_RESTART_REQUEST)
        elif symbol == key.ESCAPE:
            self.session.deselect()


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    window = CookieWindow()
    logger.info("Opened %dx%d window", window.width, window.height)
    run()

if __name__ == "__main__":
    main()
