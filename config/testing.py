import os

from config.base import (  # noqa: F401
    PERMANENT_SESSION_LIFETIME,
    SESSION_COOKIE_HTTPONLY,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SAMESITE,
    db_config_from_env,
)

SECRET_KEY = "test-secret"
DB_CONFIG = db_config_from_env("placement_attendance_test")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
SESSION_COOKIE_SECURE = False

AUTO_INIT_DB = False
