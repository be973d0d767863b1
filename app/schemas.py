# app/schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

# Field names follow the JSON contract of the dashboard client (camelCase).

class TransactionIn(BaseModel):
    """One upstream sale record; all seven fields are mandatory."""
    id: Optional[int] = None
    title: str
    description: str
    price: float
    category: str
    dateOfSale: datetime
    sold: bool
    image: str

class TransactionOut(BaseModel):
    id: int
    title: str
    description: str
    price: float
    category: str
    dateOfSale: Optional[datetime] = None
    sold: bool
    image: str

class Statistics(BaseModel):
    totalSales: float = 0
    totalSoldItems: int = 0
    totalNotSoldItems: int = 0

class PriceRangeData(BaseModel):
    data: List[int] = Field(..., min_length=6, max_length=6)

class CategoryCount(BaseModel):
    category: str
    count: int

class CategoryData(BaseModel):
    data: List[CategoryCount] = Field(default_factory=list)

class CombinedData(BaseModel):
    statistics: Statistics
    priceRangeData: PriceRangeData
    categoryData: CategoryData

class SeedResult(BaseModel):
    message: str
    count: int
