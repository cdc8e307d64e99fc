"""SQLAlchemy models for the lineform rate book."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class DecimalText(TypeDecorator):
    """Exact decimal stored as its plain text form.

    SQLite has no decimal type, so ``Numeric`` would round-trip through float
    and cut values to a fixed scale.
    """

    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return format(Decimal(value), "f")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


class ExchangeRate(Base):
    """Conversion multiplier from a currency to the base currency."""

    __tablename__ = "exchange_rates"

    id = Column(Integer, primary_key=True)
    currency = Column(String(8), nullable=False)
    multiplier = Column(DecimalText, nullable=False)
    effective_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # One rate per currency per day
    __table_args__ = (
        UniqueConstraint("currency", "effective_date", name="uq_currency_effective_date"),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
