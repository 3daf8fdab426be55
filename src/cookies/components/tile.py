from dataclasses import dataclass

@dataclass(slots=True)
class TileType:
    """Per-cell token type assignment.

    Stores only the semantic type_name. Marked/cleared state is handled by ClearMark.
    Colors and glyphs live on the singleton entity with TokenTypeRegistry + TokenTypes.
    """
    type_name: str
