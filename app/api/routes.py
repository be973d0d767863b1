# app/api/routes.py
from fastapi import APIRouter, Depends
from typing import List, Optional
from .. import analytics, schemas, services
from ..db import RecordStore, get_store
from ..errors import AnalyticsError, InvalidMonth, InvalidYear, MissingParameters, MalformedUpstreamPayload, UpstreamUnavailable
from ..utils import logger

router = APIRouter()

# errors reported to the client as-is; anything else becomes a generic 500
CLIENT_ERRORS = (InvalidMonth, InvalidYear, MissingParameters)


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/transactions", response_model=List[schemas.TransactionOut])
def transactions(store: RecordStore = Depends(get_store)):
    try:
        return services.list_transactions(store)
    except Exception as e:
        logger.exception("Error fetching transactions: %s", e)
        raise AnalyticsError("Error fetching transactions") from e


@router.get("/statistics", response_model=schemas.Statistics)
def statistics(month: Optional[str] = None, year: Optional[str] = None,
               store: RecordStore = Depends(get_store)):
    if not month or not year:
        raise MissingParameters()
    try:
        return analytics.sales_summary(store, month, year)
    except CLIENT_ERRORS:
        raise
    except Exception as e:
        logger.exception("Error fetching statistics: %s", e)
        raise AnalyticsError("Error fetching statistics") from e


@router.get("/price-range", response_model=schemas.PriceRangeData)
def price_range(month: Optional[str] = None, year: Optional[str] = None,
                store: RecordStore = Depends(get_store)):
    return analytics.price_range_data(store, month, year)


@router.get("/categories", response_model=schemas.CategoryData)
def categories(month: Optional[str] = None, year: Optional[str] = None,
               store: RecordStore = Depends(get_store)):
    return analytics.category_data(store, month, year)


@router.get("/combined-data", response_model=schemas.CombinedData)
async def combined(month: Optional[str] = None, year: Optional[str] = None,
                   store: RecordStore = Depends(get_store)):
    try:
        return await analytics.combined_data(store, month, year)
    except CLIENT_ERRORS:
        raise
    except Exception as e:
        logger.exception("Error fetching combined data: %s", e)
        raise AnalyticsError("Error fetching combined data") from e


@router.post("/seed", response_model=schemas.SeedResult)
def seed(store: RecordStore = Depends(get_store)):
    try:
        count = services.seed_database(store)
    except (MalformedUpstreamPayload, UpstreamUnavailable):
        raise
    except Exception as e:
        logger.exception("Error seeding database: %s", e)
        raise AnalyticsError("Error seeding database") from e
    return {"message": "Database seeded successfully", "count": count}
