# app/models.py
"""SQLAlchemy ORM models for persisted entities.

`date_of_sale` holds naive UTC timestamps. It is nullable at the database
level only so that legacy rows without a usable date can still be read;
inserts always go through `schemas.TransactionIn`, which requires it.
"""
from sqlalchemy import Column, Integer, Text, Float, Boolean, DateTime, Index
from sqlalchemy.types import TypeDecorator
from .db import Base

class LenientDateTime(TypeDecorator):
    """DateTime that reads an unparseable stored value as None.

    Backends that keep timestamps as text (SQLite) can hold strings the
    dialect cannot parse; those rows load with no date instead of failing.
    """
    impl = DateTime
    cache_ok = True

    def result_processor(self, dialect, coltype):
        process = super().result_processor(dialect, coltype)
        if process is None:
            return None

        def lenient(value):
            try:
                return process(value)
            except (ValueError, TypeError):
                return None
        return lenient

class ProductTransaction(Base):
    __tablename__ = "product_transactions"
    id = Column(Integer, primary_key=True, index=True)
    source_id = Column(Integer)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    category = Column(Text, nullable=False)
    date_of_sale = Column(LenientDateTime)
    sold = Column(Boolean, nullable=False)
    image = Column(Text, nullable=False)

Index("idx_product_transactions_date_of_sale", ProductTransaction.date_of_sale)
Index("idx_product_transactions_category", ProductTransaction.category)
