# app/crud.py
"""Queries against the `ProductTransaction` collection.

Every helper takes an open `Session`. Database failures surface as
`StoreUnavailable`; nothing here retries.
"""
from datetime import datetime, timezone
from functools import wraps
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import StoreUnavailable
from .models import ProductTransaction
from .schemas import TransactionIn
from .utils import logger


def _store_errors(f):
    @wraps(f)
    def wrapper(db: Session, *args, **kwargs):
        try:
            return f(db, *args, **kwargs)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Record store error in %s: %s", f.__name__, e)
            raise StoreUnavailable() from e
    return wrapper


def to_store_datetime(value: datetime) -> datetime:
    """Normalize to naive UTC; naive input is taken to be UTC already."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _in_range(start: datetime, end: datetime):
    return (
        ProductTransaction.date_of_sale >= to_store_datetime(start),
        ProductTransaction.date_of_sale < to_store_datetime(end),
    )


@_store_errors
def find_by_date_range(db: Session, start: datetime, end: datetime, sold: Optional[bool] = None) -> List[ProductTransaction]:
    stmt = select(ProductTransaction).where(*_in_range(start, end))
    if sold is not None:
        stmt = stmt.where(ProductTransaction.sold == sold)
    return list(db.scalars(stmt).all())


@_store_errors
def count_by(db: Session, key_expr, start: datetime, end: datetime) -> List[Tuple[object, int]]:
    """Group records in [start, end) by `key_expr` and count each group.

    `key_expr` may be a plain column or a computed expression; it is
    labelled in a subquery so the GROUP BY never repeats bound parameters.
    """
    keyed = select(key_expr.label("key")).where(*_in_range(start, end)).subquery()
    stmt = select(keyed.c.key, func.count().label("count")).group_by(keyed.c.key)
    return [(row.key, row.count) for row in db.execute(stmt)]


@_store_errors
def list_transactions(db: Session) -> List[ProductTransaction]:
    return list(db.scalars(select(ProductTransaction).order_by(ProductTransaction.id)).all())


@_store_errors
def replace_all(db: Session, records: Iterable[TransactionIn]) -> int:
    """Delete the whole collection and insert `records` in one transaction."""
    rows = [
        ProductTransaction(
            source_id=r.id,
            title=r.title,
            description=r.description,
            price=r.price,
            category=r.category,
            date_of_sale=to_store_datetime(r.dateOfSale),
            sold=r.sold,
            image=r.image,
        )
        for r in records
    ]
    db.execute(delete(ProductTransaction))
    db.add_all(rows)
    db.commit()
    return len(rows)
