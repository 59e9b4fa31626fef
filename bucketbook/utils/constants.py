APP_NAME = "Bucketbook"
DB_FILE = "bucketbook.db"
DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

DAY_INTERVALS = {
    "daily": 1,
    "weekly": 7,
    "fortnightly": 14,
}

# Hard stop for any occurrence loop; a truncated sequence resumes on the next pass.
MAX_OCCURRENCE_ITERATIONS = 10_000

DUPLICATE_WINDOW_DAYS = 1
DUPLICATE_AMOUNT_TOLERANCE = 0.01

DEFAULT_DELETE_POLICY = "orphan"
DEFAULT_LOG_LEVEL = "INFO"
