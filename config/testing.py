SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

STORAGE_BACKEND = "memory"

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "choir_console_test",
}

STORAGE_PREFIX = "umbral_"
STORAGE_QUOTA_BYTES = 5 * 1024 * 1024
AUTOSAVE_DELAY = 0.0

ATTENDANCE_DAYS = (5, 6)

REMOTE_MIRROR_ENABLED = False

AUTO_INIT_DB = False
