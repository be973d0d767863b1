# app/db.py
"""Database engine and the record store handle.

The `RecordStore` owns one SQLAlchemy engine and its session factory. It is
created once by the application lifespan, opened at startup, closed on
shutdown, and handed to request handlers through `get_store`.
"""
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import DATABASE_URL, DB_POOL_SIZE, DB_MAX_OVERFLOW

Base = declarative_base()


def build_engine(url: str):
    if url.startswith("sqlite"):
        # sessions are used from worker threads
        return create_engine(url, connect_args={"check_same_thread": False})
    # tuned pool settings for cloud DB
    return create_engine(
        url,
        pool_size=DB_POOL_SIZE,
        max_overflow=DB_MAX_OVERFLOW,
        pool_pre_ping=True
    )


class RecordStore:
    """Handle to the product transaction collection."""

    def __init__(self, url: str = DATABASE_URL, engine=None):
        self.url = url
        self.engine = engine if engine is not None else build_engine(url)
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)

    def open(self):
        from . import models  # noqa: F401 register tables on Base.metadata
        Base.metadata.create_all(bind=self.engine)

    def close(self):
        self.engine.dispose()

    @contextmanager
    def session(self):
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()


def get_store(request: Request) -> RecordStore:
    return request.app.state.store
