# app/scheduler.py
from apscheduler.schedulers.background import BackgroundScheduler
from .db import RecordStore
from .errors import AnalyticsError
from .services import seed_database
from .utils import logger

def reseed_job(store: RecordStore):
    try:
        seed_database(store)
    except AnalyticsError as e:
        logger.error("Scheduled reseed failed: %s", e.message)

def start_scheduler(store: RecordStore, hours: float) -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    scheduler.add_job(reseed_job, 'interval', hours=hours, args=[store], id="reseed", max_instances=1)
    scheduler.start()
    logger.info("Scheduler started, reseeding every %s hours", hours)
    return scheduler
