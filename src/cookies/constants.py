GRID_SIZE = 6
TOKEN_TYPE_COUNT = 5
MIN_TOKEN_TYPES = 4
MOVE_BUDGET = 30
POINTS_PER_TOKEN = 10
MIN_RUN_LENGTH = 3

# Delays in seconds between scheduled cascade continuations.
SWAP_DELAY = 0.1     # swap applied -> first detection
PHASE_DELAY = 0.3    # post-mark snapshot -> compaction
STEP_DELAY = 0.1     # post-compact snapshot -> next detection

# Upper bound on detect/clear/compact steps for a single swap.
MAX_CASCADE_STEPS = 1000

# Token palette: type name -> (background color, glyph). Order decides which
# types are spawnable for a given type count.
TOKEN_PALETTE = {
    'pink':   ((236, 72, 153), '\U0001F353'),   # strawberry
    'purple': ((168, 85, 247), '\U0001F347'),   # grapes
    'blue':   ((59, 130, 246), '\U0001FAD0'),   # blueberries
    'yellow': ((234, 179, 8), '\U0001F34B'),    # lemon
    'orange': ((249, 115, 22), '\U0001F34A'),   # tangerine
    'green':  ((34, 197, 94), '\U0001F34F'),    # green apple
    'red':    ((220, 38, 38), '\U0001F352'),    # cherries
}

# Window and board geometry for the arcade adapter.
WINDOW_WIDTH = 640
WINDOW_HEIGHT = 760
WINDOW_TITLE = "Cookie Run Kingdom"
TILE_PADDING = 4
BOTTOM_MARGIN = 40
HUD_HEIGHT = 120

# Board maximum footprint relative to window (percentage of window width/height).
BOARD_MAX_WIDTH_PCT = 0.90
BOARD_MAX_HEIGHT_PCT = 0.80
