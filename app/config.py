# app/config.py
"""Environment configuration.

Values are read once at import time from the process environment (and a
local `.env` file when present).
"""
import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_SEED_URL = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"


def _normalize_db_url(url: str) -> str:
    # SQLAlchemy 2.x doesn't accept 'postgres://'
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


DATABASE_URL = _normalize_db_url(os.getenv("DATABASE_URL", "sqlite:///./transactions.db"))
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 5))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", 10))

SEED_URL = os.getenv("SEED_URL", DEFAULT_SEED_URL)
SEED_TIMEOUT = float(os.getenv("SEED_TIMEOUT", 30))
SEED_FETCH_TRIES = int(os.getenv("SEED_FETCH_TRIES", 3))
SEED_INTERVAL_HOURS = float(os.getenv("SEED_INTERVAL_HOURS", 0))
SEED_ON_STARTUP = os.getenv("SEED_ON_STARTUP", "0") == "1"

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]

PORT = int(os.getenv("PORT", 8000))
