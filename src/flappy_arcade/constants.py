"""
constants.py: Centralized default configuration for the game and its storage.
"""

# -------- Timing Config --------
TICK_RATE = 60                  # Simulation ticks per second (display refresh)
TICK_TIME = 1.0 / TICK_RATE     # Simulated seconds per tick
MAX_FRAME_TIME = 0.25           # Longest wall-clock step fed to the loop at once
COUNTDOWN_START = 3             # Countdown begins at 3 and runs down to 1
COUNTDOWN_INTERVAL = 1.0        # seconds

# -------- Play Area Config --------
SCREEN_WIDTH = 400
SCREEN_HEIGHT = 700
ENTITY_START_X = 100
ENTITY_START_Y = 300
ENTITY_WIDTH = 50
ENTITY_HEIGHT = 50

# -------- Obstacle Config --------
OBSTACLE_WIDTH = 60
OBSTACLE_SPEED = 2.0            # pixels/tick
OBSTACLE_SPAWN_INTERVAL = 2.5   # seconds
INITIAL_GAP = 350.0
MINIMUM_GAP = 70.0
GAP_DECREASE_PER_POINT = 5.0
MIN_TOP_HEIGHT = 100.0          # Top segment is never shorter than this
BOTTOM_MARGIN = 150.0           # Bottom segment is never shorter than this

# Difficulty thresholds on (initial - gap) / (initial - minimum)
DIFFICULTY_MEDIUM_AT = 0.3
DIFFICULTY_HARD_AT = 0.6
DIFFICULTY_EXTREME_AT = 0.9

# -------- Physics Config (pixels / tick / tick) --------
GRAVITY = 0.5
FLAP_IMPULSE = -8.0             # Absolute velocity after a flap

# -------- Leaderboard Config --------
LEADERBOARD_SIZE = 10
DB_FILE = "flappy_arcade.db"
LEADERBOARD_KEY = "leaderboard"
