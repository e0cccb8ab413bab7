"""Game configuration constants."""

# Grid dimensions
GRID_SIZE = 25

# Players
MAX_PLAYERS = 2
PLAYER_IDS = (1, 2)
STARTING_ENERGY = 100

# Turn configuration
PHASES = ("resource", "action", "build")
MAX_ACTIONS_PER_TURN = 3  # Player-wide action budget
INCOME_PER_TURN = 10  # Passive energy granted on entering the resource phase

# Bases
BASE_HEALTH = 200
BASE_POSITIONS = {1: (5, 5), 2: (19, 19)}
PLACEMENT_RADIUS = 3  # Manhattan radius around own base for new units
MAX_PLACEMENT_RADIUS = 5  # Fallback radius when the base area is crowded

# Resource nodes
NODE_INITIAL_VALUE = 100
NODE_REGENERATION_RATE = 5  # Per resource phase
GATHER_AMOUNT = 5
GATHER_RANGE = 1  # Manhattan distance from worker to node
NODE_POSITIONS = (
    (4, 4),
    (12, 4),
    (20, 4),
    (4, 12),
    (12, 12),
    (20, 12),
    (4, 20),
    (12, 20),
    (20, 20),
)

# Combat
ATTACK_RANGE = 1  # Chebyshev distance, 8-neighbourhood

# Victory
MIN_ELIMINATION_TURN = 10
DRAW = "draw"  # Winner sentinel for a drawn game

# Command history
HISTORY_LIMIT = 50  # Undoable commands kept per phase

# Game status values
STATUS_READY = "ready"
STATUS_PLAYING = "playing"
STATUS_ENDED = "ended"

# Snapshot format
SNAPSHOT_VERSION = 1
