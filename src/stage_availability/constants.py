"""Constants for availability and castability search."""

# Default cap on materialized combinations per enumeration call
DEFAULT_MAX_COMBINATIONS = 10_000

# No elapsed-time budget unless configured
DEFAULT_TIME_BUDGET_SECONDS: float | None = None

# Minimum slot length for play/scene searches (minutes)
DEFAULT_MIN_DURATION = 60
MIN_DURATION_BOUNDS = (1, 1440)

# Minimum free block length for user availability checks (minutes)
DEFAULT_MIN_BLOCK_MINUTES = 15
MIN_BLOCK_BOUNDS = (1, 480)

# Upper bound on users in one bulk availability check
MAX_BULK_USERS = 50

ENTITY_TYPES = ("play", "scene")

ENGINE_CONFIG_FILENAME = "engine.json"
