"""Reseed the record store once from the upstream JSON dump.

Usage: python seed_db.py [URL]
"""
import sys

from app.config import DATABASE_URL, SEED_URL
from app.db import RecordStore
from app.errors import AnalyticsError
from app.services import seed_database


if __name__ == "__main__":
    url = sys.argv[1] if len(sys.argv) > 1 else SEED_URL
    store = RecordStore(DATABASE_URL)
    store.open()
    try:
        count = seed_database(store, url)
    except AnalyticsError as e:
        raise SystemExit(f"Seeding failed: {e.message}")
    finally:
        store.close()
    print(f"Seeded {count} transactions from {url}")
