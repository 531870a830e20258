"""Game constants."""

GRID_W, GRID_H = 25, 25
MIN_PLAYABLE_GRID = 5

BASE_TICK_MS = 120
MIN_TICK_MS = 40
LEVEL_SPEEDUP = 0.95
EFFECT_SLOWDOWN = 2

LEVEL_TARGETS = (3, 3, 3, 3, 3)
LEVEL_APPLE_INTERVALS = (2000, 1500, 1000, 500, 200)
WANDER_JITTER = (0.75, 1.25)

WORM_MOVE_MS = 800
WORM_INITIAL_LENGTH = 2
WORM_GREEDY_CHANCE = 0.9

GOLDEN_APPLE_MIN_LEVEL = 2
GOLDEN_EFFECT_MS = 6000
GOLDEN_WANDER_MS = 1200

TUNNEL_MIN_LEVEL = 3
TUNNEL_MIN_DISTANCE = 8.0
TUNNEL_EDGE_BUFFER = 2
TUNNEL_ATTEMPTS = 500

APPLE_RESPAWN_MS = (400, 1500)

MAX_RECORDS = 10

DIRECTIONS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}
OPPOSITES = {"up": "down", "down": "up", "left": "right", "right": "left"}
