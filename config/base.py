import os
from datetime import timedelta


def db_config_from_env(default_database: str) -> dict:
    """mysql-connector settings read from the DB_* variables."""

    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", default_database),
        "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
    }


# Sessions are issued by the auth service; these only govern the cookie.
SESSION_COOKIE_NAME = "placement_session"
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"
# One working day plus slack, so a check-in session survives to check-out.
PERMANENT_SESSION_LIFETIME = timedelta(hours=12)
