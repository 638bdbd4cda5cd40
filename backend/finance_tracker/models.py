from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, String, Text, UniqueConstraint

from .database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_date_created", "date", "created_at"),
        Index("ix_transactions_type_category", "type", "category"),
    )

    id = Column(Integer, primary_key=True, index=True)
    amount_cents = Column(Integer, nullable=False)          # always positive
    date = Column(String(10), nullable=False)               # YYYY-MM-DD
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=False)
    type = Column(String(10), nullable=False)               # income | expense
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)


class Budget(Base):
    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("category", "month", name="uq_budgets_category_month"),
    )

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(50), nullable=False)
    amount_cents = Column(Integer, nullable=False)
    month = Column(String(7), nullable=False, index=True)   # YYYY-MM
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)
