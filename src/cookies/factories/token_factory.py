from __future__ import annotations

import random
from typing import Sequence

from cookies.components.token_types import TokenTypes
from cookies.snapshots import Token


class TokenFactory:
    """Produces randomly typed tokens.

    Types are drawn uniformly and independently of neighbouring cells, so a fresh
    board or a refilled column may already contain runs.
    """

    def __init__(self, type_names: Sequence[str], rng: random.Random | None = None):
        if not type_names:
            raise ValueError("TokenFactory needs at least one token type")
        self.type_names = list(type_names)
        self.rng = rng or random.Random()

    @classmethod
    def from_registry(cls, registry: TokenTypes, rng: random.Random | None = None) -> TokenFactory:
        return cls(registry.spawnable_types(), rng)

    def create(self, row: int, col: int) -> Token:
        return Token(type_name=self.rng.choice(self.type_names), row=row, col=col)
