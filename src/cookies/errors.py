class CookieError(Exception):
    """Base class for game engine errors."""


class InvalidPosition(CookieError, ValueError):
    """Coordinates fall outside the board."""

    def __init__(self, row: int, col: int, size: int):
        super().__init__(f"Position ({row}, {col}) is outside the {size}x{size} board")
        self.row = row
        self.col = col
        self.size = size


class InternalInvariantViolation(CookieError, RuntimeError):
    """The board reached a state with no defined recovery; the game must restart."""
