import os

from config import parse_weekdays

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "choir_console"),
}

STORAGE_PREFIX = os.getenv("STORAGE_PREFIX", "umbral_")
STORAGE_QUOTA_BYTES = int(os.getenv("STORAGE_QUOTA_BYTES", str(5 * 1024 * 1024)))
AUTOSAVE_DELAY = float(os.getenv("AUTOSAVE_DELAY", "0.5"))

ATTENDANCE_DAYS = parse_weekdays(os.getenv("ATTENDANCE_DAYS", "5,6"))

REMOTE_MIRROR_ENABLED = bool(int(os.getenv("REMOTE_MIRROR_ENABLED", "0")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
