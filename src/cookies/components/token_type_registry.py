from dataclasses import dataclass

@dataclass(slots=True)
class TokenTypeRegistry:
    """Empty tag component marking the single entity that stores canonical token type definitions.

    The same entity also has a TokenTypes component containing type_name -> (color, glyph).
    """
    pass
