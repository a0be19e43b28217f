import logging
import os

logger = logging.getLogger(__name__)

# Get DATABASE_URL, but validate it; fallback to SQLite if invalid
_raw_db_url = os.getenv("DATABASE_URL", "sqlite:///questlist.db")
_db_url_rejected = bool(_raw_db_url) and not _raw_db_url.startswith(("sqlite://", "postgresql://", "postgres://"))

if _db_url_rejected:
    DATABASE_URL = "sqlite:///questlist.db"
else:
    DATABASE_URL = _raw_db_url

LOG_LEVEL = os.getenv("QUESTLIST_LOG_LEVEL", "INFO").upper()

# XP needed to leave a level is level * XP_PER_LEVEL
XP_PER_LEVEL = 100

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = None):
    """Configure root logging once for the app process."""
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
    if _db_url_rejected:
        logger.warning("Invalid DATABASE_URL detected. Using SQLite fallback.")


def get_diagnostics():
    return {
        "Database": "SQLite (Default)" if "sqlite" in DATABASE_URL else "Postgres",
        "Log level": LOG_LEVEL,
        "XP per level": XP_PER_LEVEL,
    }
