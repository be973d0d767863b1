# app/services.py
"""Listing and bulk reseed of product transactions.

Reseeding deletes the whole collection and inserts the fresh batch inside
one database transaction. On backends where that transaction does not
isolate concurrent readers, a read between the delete and the insert sees
a partially empty collection.
"""
from datetime import datetime, timezone
from typing import Any, List, Optional

import requests
from pydantic import ValidationError

from . import crud, schemas
from .config import SEED_URL, SEED_TIMEOUT, SEED_FETCH_TRIES
from .db import RecordStore
from .errors import InvalidRecord, MalformedUpstreamPayload, UpstreamUnavailable
from .models import ProductTransaction
from .utils import logger, retry


def to_transaction_out(row: ProductTransaction) -> schemas.TransactionOut:
    date_of_sale = row.date_of_sale
    if not isinstance(date_of_sale, datetime):
        # missing or unreadable stored date
        date_of_sale = None
    elif date_of_sale.tzinfo is None:
        date_of_sale = date_of_sale.replace(tzinfo=timezone.utc)
    return schemas.TransactionOut(
        id=row.id,
        title=row.title,
        description=row.description,
        price=row.price,
        category=row.category,
        dateOfSale=date_of_sale,
        sold=row.sold,
        image=row.image,
    )


def list_transactions(store: RecordStore) -> List[schemas.TransactionOut]:
    with store.session() as db:
        rows = crud.list_transactions(db)
        return [to_transaction_out(r) for r in rows]


@retry((requests.ConnectionError, requests.Timeout), tries=SEED_FETCH_TRIES, delay=1, backoff=2)
def _get(url: str, timeout: float) -> requests.Response:
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response


def fetch_upstream(url: str = SEED_URL, timeout: float = SEED_TIMEOUT) -> List[Any]:
    try:
        response = _get(url, timeout)
    except requests.RequestException as e:
        logger.error("Fetching %s failed: %s", url, e)
        raise UpstreamUnavailable() from e
    try:
        payload = response.json()
    except ValueError:
        raise MalformedUpstreamPayload() from None
    if not isinstance(payload, list):
        raise MalformedUpstreamPayload()
    return payload


def parse_records(payload: List[Any]) -> List[schemas.TransactionIn]:
    """Validate every upstream item; one bad item rejects the batch."""
    records = []
    for index, item in enumerate(payload):
        try:
            records.append(schemas.TransactionIn.model_validate(item))
        except ValidationError as e:
            logger.warning("Rejected upstream record #%d (%d errors)", index, e.error_count())
            raise InvalidRecord() from None
    return records


def seed_database(store: RecordStore, url: Optional[str] = None) -> int:
    payload = fetch_upstream(url or SEED_URL)
    records = parse_records(payload)
    with store.session() as db:
        count = crud.replace_all(db, records)
    logger.info("Seeded %d transactions", count)
    return count
