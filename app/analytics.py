# app/analytics.py
"""Monthly analytics over product transactions.

Three reducers each resolve the month/year interval and read the record
store independently:

- `sales_summary`: revenue from sold items plus sold/unsold counts
- `compute_price_ranges`: six-bucket price histogram
- `compute_categories`: record count per category

All three raise on failure. `price_range_data` and `category_data` are the
lenient entry points used by dashboard widgets: missing parameters or any
failure give the empty default.

`combined_data` runs the reducers concurrently and decides per field,
through `FIELD_POLICIES`, whether a failure aborts the response or is
replaced by that field's default.
"""
import asyncio
from enum import Enum
from typing import Dict, Optional

from sqlalchemy import case
from starlette.concurrency import run_in_threadpool

from . import crud
from .daterange import resolve
from .db import RecordStore
from .errors import MissingParameters
from .models import ProductTransaction
from .schemas import Statistics, PriceRangeData, CategoryCount, CategoryData, CombinedData
from .utils import logger

# (label, inclusive upper bound); the last bucket is open-ended
PRICE_RANGES = (
    ("0-50", 50),
    ("51-100", 100),
    ("101-200", 200),
    ("201-500", 500),
    ("501-1000", 1000),
    ("1001+", None),
)


def price_bucket(price: float) -> int:
    for index, (_, upper) in enumerate(PRICE_RANGES):
        if upper is None or price <= upper:
            return index
    raise AssertionError("unreachable: last bucket is open-ended")


def price_bucket_expr(column):
    """SQL counterpart of `price_bucket`."""
    whens = [(column <= upper, index) for index, (_, upper) in enumerate(PRICE_RANGES) if upper is not None]
    return case(*whens, else_=len(PRICE_RANGES) - 1)


def empty_price_ranges() -> PriceRangeData:
    return PriceRangeData(data=[0] * len(PRICE_RANGES))


def empty_categories() -> CategoryData:
    return CategoryData(data=[])


def sales_summary(store: RecordStore, month, year) -> Statistics:
    interval = resolve(month, year)
    # one session for both partitions
    with store.session() as db:
        sold = crud.find_by_date_range(db, interval.start, interval.end, sold=True)
        not_sold = crud.find_by_date_range(db, interval.start, interval.end, sold=False)
    return Statistics(
        totalSales=sum(item.price for item in sold),
        totalSoldItems=len(sold),
        totalNotSoldItems=len(not_sold),
    )


def compute_price_ranges(store: RecordStore, month, year) -> PriceRangeData:
    interval = resolve(month, year)
    with store.session() as db:
        groups = crud.count_by(db, price_bucket_expr(ProductTransaction.price), interval.start, interval.end)
    result = empty_price_ranges()
    for index, count in groups:
        if index is not None and 0 <= index < len(result.data):
            result.data[index] = count
    return result


def compute_categories(store: RecordStore, month, year) -> CategoryData:
    interval = resolve(month, year)
    with store.session() as db:
        groups = crud.count_by(db, ProductTransaction.category, interval.start, interval.end)
    return CategoryData(data=[CategoryCount(category=category, count=count) for category, count in groups])


def price_range_data(store: RecordStore, month, year) -> PriceRangeData:
    if not month or not year:
        return empty_price_ranges()
    try:
        return compute_price_ranges(store, month, year)
    except Exception:
        logger.exception("Price range data unavailable for %s %s", month, year)
        return empty_price_ranges()


def category_data(store: RecordStore, month, year) -> CategoryData:
    if not month or not year:
        return empty_categories()
    try:
        return compute_categories(store, month, year)
    except Exception:
        logger.exception("Category data unavailable for %s %s", month, year)
        return empty_categories()


class FailurePolicy(str, Enum):
    STRICT = "strict"  # failure aborts the combined response
    LENIENT = "lenient"  # failure is logged and the field default is used


# field -> (reducer, default factory)
REDUCERS = {
    "statistics": (sales_summary, Statistics),
    "priceRangeData": (compute_price_ranges, empty_price_ranges),
    "categoryData": (compute_categories, empty_categories),
}

FIELD_POLICIES = {
    "statistics": FailurePolicy.STRICT,
    "priceRangeData": FailurePolicy.LENIENT,
    "categoryData": FailurePolicy.LENIENT,
}


async def combined_data(store: RecordStore, month, year,
                        policies: Optional[Dict[str, FailurePolicy]] = None) -> CombinedData:
    if not month or not year:
        raise MissingParameters()
    policies = {**FIELD_POLICIES, **(policies or {})}

    fields = list(REDUCERS)
    results = await asyncio.gather(
        *(run_in_threadpool(REDUCERS[field][0], store, month, year) for field in fields),
        return_exceptions=True,
    )

    payload = {}
    for field, result in zip(fields, results):
        if not isinstance(result, BaseException):
            payload[field] = result
            continue
        if not isinstance(result, Exception) or policies[field] == FailurePolicy.STRICT:
            raise result
        logger.warning("Combined data: %s degraded to default: %r", field, result)
        payload[field] = REDUCERS[field][1]()
    return CombinedData(**payload)
