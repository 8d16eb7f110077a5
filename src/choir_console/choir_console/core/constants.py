"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import date

STORAGE_PREFIX = "umbral_"
DEFAULT_STORAGE_QUOTA_BYTES = 5 * 1024 * 1024

TABLE_KEYS = ("users", "choirs", "members", "reports", "events")
SESSION_KEY = "session"
SYNC_CHANNEL_KEY = "sync"

ADMIN_LOGIN = "Admin"
DIRECTOR_SUFFIX = "Dr"

FOLLOW_UP_THRESHOLD = 3

# date.weekday(): Saturday=5, Sunday=6
DEFAULT_ATTENDANCE_DAYS = (5, 6)

SERIES_START = date(2026, 1, 31)
SERIES_END = date(2026, 4, 6)

MAX_IMAGE_BYTES = 1_500_000
IMAGE_SIZE = (400, 400)
IMAGE_JPEG_QUALITY = 70

MISSING_LABEL = "---"
