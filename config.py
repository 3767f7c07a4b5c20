# config.py - Global Configuration

# Game client
BASE_URL = "https://www.neuraknights.gg"
HOME_URL = "https://www.neuraknights.gg/home"
AUTH_STORAGE_PREFIX = "nova-link-auth-token"
AUTH_STORAGE_KEY = "nova-link-auth-token-5g7WL0v8820py9fB"
AUTH_TOKEN_TTL_DAYS = 7
USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 16_0 like Mac OS X) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/16.0 "
    "Mobile/15E148 Safari/604.1"
)
NAVIGATION_TIMEOUT_MS = 60000

# Viewport (all zone coordinates are measured against this size)
VIEWPORT_WIDTH = 500
VIEWPORT_HEIGHT = 815

# Session bootstrap
GAME_READY_TIMEOUT = 25      # seconds polling for the first game marker
HOME_READY_TIMEOUT = 5       # seconds polling after navigating home

# Gesture timing (seconds)
DRAG_STEPS = 15
DRAG_STEP_DELAY = 0.04
DRAG_HOLD = 0.3
DRAG_RELEASE_SETTLE = 1.5
RESET_CLICK_DELAY = 0.15

# Turn engine
FULL_ENERGY = 5
FULL_HAND_SIZE = 5
MAX_ROUNDS_PER_TURN = 20
MAX_ATTEMPTS_PER_SLOT = 1
VERIFY_SETTLE = 0.5
END_TURN_SETTLE = 2.5
ENEMY_ANIMATION_WAIT = 2.5

# Battle supervisor
BATTLE_LOAD_WAIT = 3
MAX_TURNS_PER_BATTLE = 50
MAX_WAIT_FOR_TURN = 30       # one-second polls
MAX_DISMISS_RETRIES = 5

# Map session
MAX_PLAYS_PER_LOCATION = 10
MAP_ORDER = [
    "TRAINING", "FOREST", "BRIDGE", "CAVES",
    "GHOST TOWN", "MOUNTAIN", "CASTLE",
]

# Multi-game support
GAMES_DIR = "games"
ACTIVE_GAME = "neuraknights"

# Logging / output
LOG_DIR = "logs"
SESSION_FILE = "data/last_session.json"
