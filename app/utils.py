# app/utils.py
"""Service-wide logger and the retry decorator used for upstream calls."""
import os
import logging
import time
from functools import wraps
from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"

def get_logger(name="transactions-service"):
    logging.basicConfig(
        format=LOG_FORMAT,
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    )
    return logging.getLogger(name)

logger = get_logger()

def retry(exceptions, tries=3, delay=1, backoff=2, logger=logger):
    """Call the wrapped function up to `tries` times while it raises `exceptions`.

    Waits `delay` seconds after the first failure, multiplied by `backoff`
    after each further one. The error of the final attempt propagates.
    """
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            wait = delay
            for attempt in range(1, tries + 1):
                try:
                    return f(*args, **kwargs)
                except exceptions as e:
                    if attempt == tries:
                        logger.error("%s gave up after %d attempts: %s", f.__name__, tries, e)
                        raise
                    logger.warning("%s attempt %d/%d failed: %s; next try in %ss", f.__name__, attempt, tries, e, wait)
                    time.sleep(wait)
                    wait *= backoff
        return wrapper
    return decorator
