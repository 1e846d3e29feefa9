from datetime import timezone

DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
DEFAULT_INTERVAL_DAYS = 1
MIN_INTERVAL_DAYS = 1
MAX_INTERVAL_DAYS = 100 * 365  # keeps next_review_at well inside datetime range

EASE_DELTA = {
    "again": -0.20,
    "hard": -0.15,
    "good": 0.0,
    "easy": +0.15,
}
HARD_GROWTH = 1.2
EASY_BONUS = 1.3

# Status thresholds (days)
REVIEW_THRESHOLD_DAYS = 7
MASTERED_THRESHOLD_DAYS = 30

DUE_PAGE_SIZE = 20

# Whole load/apply/save cycles tried before a ConflictError reaches the client
SAVE_ATTEMPTS = 3

DAY_BOUNDARY_TZ = timezone.utc
