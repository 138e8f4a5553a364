# partflow/core/config.py

import os
from dotenv import load_dotenv
from partflow.utils.logger import get_logger

logger = get_logger(__name__)

load_dotenv()

# =====================================================
# APPLICATION
# =====================================================
APP_ENV = os.getenv("APP_ENV", "development")
if APP_ENV not in {"development", "test", "production"}:
    raise ValueError("APP_ENV must be development | test | production")

IS_PRODUCTION = APP_ENV == "production"

CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()
]

# =====================================================
# DATABASE
# =====================================================
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "sqlite+aiosqlite:///./data/partflow.db",
)
if not DATABASE_URL.startswith("sqlite"):
    raise ValueError("DATABASE_URL must point to a SQLite database")

DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

# Milliseconds SQLite waits on a locked database before raising
DB_BUSY_TIMEOUT_MS = int(os.getenv("DB_BUSY_TIMEOUT_MS", 5000))

# =====================================================
# INVENTORY
# =====================================================
INVENTORY_MAX_RETRIES = int(os.getenv("INVENTORY_MAX_RETRIES", 3))

HISTORY_DEFAULT_LIMIT = int(os.getenv("HISTORY_DEFAULT_LIMIT", 50))
HISTORY_MAX_LIMIT = int(os.getenv("HISTORY_MAX_LIMIT", 500))

# =====================================================
# ADMIN
# =====================================================
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY") or None
if IS_PRODUCTION and not ADMIN_API_KEY:
    logger.warning(
        "ADMIN_API_KEY is not set; administrative quantity overwrite is disabled"
    )

# =====================================================
# SCHEDULER
# =====================================================
ENABLE_SCHEDULER = (
    os.getenv(
        "ENABLE_SCHEDULER",
        "true" if APP_ENV == "development" else "false",
    ).lower()
    == "true"
)
LOW_STOCK_REPORT_HOUR = int(os.getenv("LOW_STOCK_REPORT_HOUR", 7))
