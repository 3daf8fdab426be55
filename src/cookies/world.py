import random

from esper import World

from cookies.config import GameConfig
from cookies.constants import TOKEN_PALETTE
from cookies.components.session_state import SessionState
from cookies.components.token_type_registry import TokenTypeRegistry
from cookies.components.token_types import TokenTypes
from cookies.factories.token_factory import TokenFactory
from cookies.systems.board_ops import create_board, populate_board


def create_world(
    config: GameConfig | None = None,
    *,
    rng: random.Random | None = None,
    factory: TokenFactory | None = None,
) -> World:
    """Build a fresh world holding the board, the token registry and a reset session.

    A restart calls this again and replaces the previous world wholesale.
    """
    config = config or GameConfig()
    world = World()
    if rng is None:
        rng = random.Random(config.seed)
    setattr(world, "random", rng)
    setattr(world, "config", config)

    world.create_entity(SessionState(moves_remaining=config.move_budget))

    # Single registry entity with the canonical palette.
    registry = TokenTypes(
        types=dict(TOKEN_PALETTE),
        spawnable=config.spawnable_types(),
    )
    world.create_entity(TokenTypeRegistry(), registry)

    if factory is None:
        factory = TokenFactory.from_registry(registry, rng)
    setattr(world, "token_factory", factory)

    create_board(world, config.grid_size)
    populate_board(world, factory)
    return world
