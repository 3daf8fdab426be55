from dataclasses import dataclass

@dataclass(slots=True)
class Board:
    """Square board dimensions; one Board entity per world."""
    size: int

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size
