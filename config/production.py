import os

from config.base import (  # noqa: F401
    PERMANENT_SESSION_LIFETIME,
    SESSION_COOKIE_HTTPONLY,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SAMESITE,
    db_config_from_env,
)

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = db_config_from_env("placement_attendance")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SESSION_COOKIE_SECURE = True

# Schema changes go through `flask init-db`, not app startup.
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
