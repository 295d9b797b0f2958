"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_BASE_ALLOWANCE = 25
DAYS_PER_YEAR = 365.25

# (minimum full years of service, bonus days)
DEFAULT_SENIORITY_BONUS_TABLE = (
    (5, 1),
    (10, 2),
    (15, 3),
    (20, 5),
    (25, 7),
    (30, 8),
)

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 300

# Column widths of the free-text fields
MAX_REASON_LENGTH = 500
MAX_COMMENT_LENGTH = 1000
MAX_TITLE_LENGTH = 200
MAX_BLACKOUT_REASON_LENGTH = 500
