from dataclasses import dataclass, field
from typing import Dict, List, Tuple

Color = Tuple[int, int, int]

@dataclass(slots=True)
class TokenTypes:
    """Canonical token type definitions stored on a single entity.

    This component lives alongside TokenTypeRegistry (tag) and provides mapping utilities.
    """
    types: Dict[str, Tuple[Color, str]]
    spawnable: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.spawnable:
            # Preserve order while filtering unknown types.
            seen: set[str] = set()
            filtered: List[str] = []
            for name in self.spawnable:
                if name in self.types and name not in seen:
                    filtered.append(name)
                    seen.add(name)
            self.spawnable = filtered or list(self.types.keys())
        else:
            self.spawnable = list(self.types.keys())

    def background_for(self, type_name: str) -> Color:
        return self.types[type_name][0]

    def glyph_for(self, type_name: str) -> str:
        return self.types[type_name][1]

    def spawnable_types(self) -> List[str]:
        return list(self.spawnable)
